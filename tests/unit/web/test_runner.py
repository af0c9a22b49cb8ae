from uvicorn.config import LOGGING_CONFIG

from ledgerdesk.web.runner import build_log_config


def test_log_config_does_not_mutate_uvicorn_defaults():
    original = LOGGING_CONFIG["formatters"]["access"]["fmt"]

    log_config = build_log_config()

    assert "%(client_addr)s" in log_config["formatters"]["access"]["fmt"]
    assert LOGGING_CONFIG["formatters"]["access"]["fmt"] == original
