"""Tests for TicketService with a mocked collection and core."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.ticket.models import Ticket, TicketStatus
from ledgerdesk.core.modules.ticket.service import TicketService
from ledgerdesk.core.modules.worksheet.models import Priority
from ledgerdesk.errors import NotFoundError, ValidationError


@pytest.fixture
def core():
    core = MagicMock()
    core.services.customer.ensure_exists = AsyncMock()
    core.services.numbering.allocate = AsyncMock(return_value="TKT-2026-042")
    return core


@pytest.fixture
def service(mock_database, core):
    service = TicketService(mock_database)
    service.set_core(core)
    return service


class TestCreateTicket:
    @pytest.mark.asyncio
    async def test_ticket_gets_tkt_number(self, service, core, mock_collection):
        customer_id = uuid4()

        ticket = await service.create_ticket(
            customer_id, "  Printer jammed ", "Tray 2 jams on every job", priority=Priority.HIGH, tags=["hardware"]
        )

        assert ticket.number == "TKT-2026-042"
        assert ticket.subject == "Printer jammed"
        assert ticket.status == TicketStatus.OPEN
        assert ticket.tags == ["hardware"]
        assert core.services.numbering.allocate.await_args.args[0] == DocumentCategory.TICKET
        # The allocation instant is the ticket's creation time
        assert core.services.numbering.allocate.await_args.args[1] == ticket.created_at
        stored = mock_collection.insert_one.await_args.args[0]
        assert stored["_id"] == ticket.id
        assert stored["number"] == "TKT-2026-042"

    @pytest.mark.asyncio
    async def test_defaults(self, service):
        ticket = await service.create_ticket(uuid4(), "Login", "Cannot log in")

        assert ticket.priority == Priority.MEDIUM
        assert ticket.category == "general"
        assert ticket.tags == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("subject", "description", "message"),
        [
            ("", "details", "Please provide subject"),
            ("   ", "details", "Please provide subject"),
            ("Subject", "", "Please provide description"),
            ("Subject", "  \n", "Please provide description"),
        ],
    )
    async def test_blank_text_rejected_before_allocation(
        self, service, core, mock_collection, subject, description, message
    ):
        with pytest.raises(ValidationError, match=message):
            await service.create_ticket(uuid4(), subject, description)

        core.services.numbering.allocate.assert_not_awaited()
        mock_collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_customer_consumes_no_number(self, service, core):
        core.services.customer.ensure_exists.side_effect = NotFoundError("Customer not found")

        with pytest.raises(NotFoundError):
            await service.create_ticket(uuid4(), "Subject", "Description")

        core.services.numbering.allocate.assert_not_awaited()


class TestTicketStatus:
    @pytest.mark.asyncio
    async def test_update_status(self, service, mock_collection):
        ticket = Ticket(number="TKT-2026-042", subject="Login", description="Cannot log in", customer_id=uuid4())
        resolved = ticket.model_copy(update={"status": TicketStatus.RESOLVED})
        mock_collection.find_one.side_effect = [ticket.to_mongo(), resolved.to_mongo()]

        result = await service.update_status(ticket.id, TicketStatus.RESOLVED)

        assert result.status == TicketStatus.RESOLVED
        filter_doc, update_doc = mock_collection.update_one.await_args.args
        assert filter_doc == {"_id": ticket.id}
        assert update_doc["$set"]["status"] == TicketStatus.RESOLVED
        assert update_doc["$set"]["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_missing_ticket(self, service, mock_collection):
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundError, match="Ticket not found"):
            await service.update_status(uuid4(), TicketStatus.CLOSED)

        mock_collection.update_one.assert_not_awaited()
