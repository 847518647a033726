"""Training request lifecycle: creation, listing, editing and rejection."""
import pytest
from sqlalchemy import select

from app.core import errors
from app.db.session import AsyncSessionLocal
from app.modules.assignments import service as assignment_service
from app.modules.learnings.models import LearningProcess, LearningStatus
from app.modules.requests import service
from app.modules.requests.models import RequestStatus
from app.modules.users.models import User


class TestCreateRequest:

    @pytest.mark.asyncio
    async def test_create_starts_pending(self, db, employee):
        req = await service.create_request(db, employee, "Go concurrency", "Channels, select, sync")

        assert req.id is not None
        assert req.user_id == employee.id
        assert req.status == RequestStatus.PENDING
        assert req.created_at == req.updated_at

    @pytest.mark.asyncio
    async def test_create_strips_text(self, db, employee):
        req = await service.create_request(db, employee, "  Kubernetes  ", "  operators ")
        assert req.topic == "Kubernetes"
        assert req.description == "operators"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("topic,description", [("", "desc"), ("topic", "   "), (None, "desc")])
    async def test_create_requires_text(self, db, employee, topic, description):
        with pytest.raises(errors.ValidationError):
            await service.create_request(db, employee, topic, description)

        assert await service.list_requests_for_user(db, employee.id) == []


class TestListRequests:

    @pytest.mark.asyncio
    async def test_list_for_user_only_returns_own(self, db, make_user, employee):
        other = await make_user("Other")
        first = await service.create_request(db, employee, "Rust", "ownership")
        second = await service.create_request(db, employee, "SQL", "window functions")
        await service.create_request(db, other, "Python", "asyncio")

        mine = await service.list_requests_for_user(db, employee.id)

        assert {r.id for r in mine} == {first.id, second.id}
        assert all(r.user_id == employee.id for r in mine)

    @pytest.mark.asyncio
    async def test_list_all_with_status_filter(self, db, admin, employee, make_request):
        pending = await make_request(employee, "A")
        rejected = await make_request(employee, "B", status=RequestStatus.REJECTED)

        everything = await service.list_all_requests(db)
        only_pending = await service.list_all_requests(db, RequestStatus.PENDING)

        assert {r.id for r in everything} == {pending.id, rejected.id}
        assert [r.id for r in only_pending] == [pending.id]

    @pytest.mark.asyncio
    async def test_list_all_unknown_status(self, db):
        with pytest.raises(errors.ValidationError):
            await service.list_all_requests(db, "archived")


class TestGetAndUpdate:

    @pytest.mark.asyncio
    async def test_owner_and_admin_can_read(self, db, employee, admin, make_request):
        req = await make_request(employee)

        assert (await service.get_request(db, req.id, employee)).id == req.id
        assert (await service.get_request(db, req.id, admin)).id == req.id

    @pytest.mark.asyncio
    async def test_other_employee_is_forbidden(self, db, employee, make_user, make_request):
        req = await make_request(employee)
        stranger = await make_user("Stranger")

        with pytest.raises(errors.Forbidden):
            await service.get_request(db, req.id, stranger)

    @pytest.mark.asyncio
    async def test_unknown_request(self, db, admin):
        with pytest.raises(errors.NotFound):
            await service.get_request(db, 999, admin)

    @pytest.mark.asyncio
    async def test_update_while_pending(self, db, employee, make_request):
        req = await make_request(employee)

        updated = await service.update_request(db, req.id, employee, "Go generics", "type parameters")

        assert updated.topic == "Go generics"
        assert updated.description == "type parameters"
        assert updated.status == RequestStatus.PENDING

    @pytest.mark.asyncio
    async def test_update_after_terminal_status(self, db, employee, make_request):
        req = await make_request(employee, status=RequestStatus.REJECTED)

        with pytest.raises(errors.InvalidTransition):
            await service.update_request(db, req.id, employee, "x", "y")


class TestReject:

    @pytest.mark.asyncio
    async def test_reject_pending(self, db, admin, employee, make_request):
        req = await make_request(employee)
        created_at = req.created_at

        rejected = await service.reject(db, req.id, admin)

        assert rejected.status == RequestStatus.REJECTED
        assert rejected.updated_at >= created_at

    @pytest.mark.asyncio
    async def test_second_transition_fails(self, db, admin, employee, make_request):
        req = await make_request(employee)
        await service.reject(db, req.id, admin)

        with pytest.raises(errors.InvalidTransition):
            await service.reject(db, req.id, admin)

        assert (await service.get_request_or_404(db, req.id)).status == RequestStatus.REJECTED

    @pytest.mark.asyncio
    async def test_reject_approved_fails(self, db, admin, employee, make_request):
        req = await make_request(employee, status=RequestStatus.APPROVED)

        with pytest.raises(errors.InvalidTransition):
            await service.reject(db, req.id, admin)

    @pytest.mark.asyncio
    async def test_reject_unknown(self, db, admin):
        with pytest.raises(errors.NotFound):
            await service.reject(db, 42, admin)


class TestRejectRace:

    @pytest.mark.asyncio
    async def test_reject_raced_by_assign(self, db, monkeypatch, admin, employee, make_mentor, make_request):
        mentor = await make_mentor()
        req = await make_request(employee)
        request_id, mentor_id, admin_id = req.id, mentor.id, admin.id

        original = service.get_request_or_404
        state = {"fired": False}

        async def load_then_assign(session, rid):
            loaded = await original(session, rid)
            if not state["fired"]:
                state["fired"] = True
                async with AsyncSessionLocal() as other:
                    other_admin = await other.get(User, admin_id)
                    await assignment_service.assign(other, request_id, mentor_id, other_admin)
            return loaded

        monkeypatch.setattr(service, "get_request_or_404", load_then_assign)

        with pytest.raises(errors.InvalidTransition):
            await service.reject(db, request_id, admin)

        monkeypatch.undo()
        # the approval written by the winner is not overwritten
        assert (await service.get_request_or_404(db, request_id)).status == RequestStatus.APPROVED
        learning = await db.scalar(select(LearningProcess).where(LearningProcess.request_id == request_id))
        assert learning.mentor_id == mentor_id
        assert learning.status == LearningStatus.ACTIVE
