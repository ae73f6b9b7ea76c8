# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed tests for enrollment, updates and transfers."""

import pytest

from schoolhub.domains.access import Actor, SchoolAccessDeniedError
from schoolhub.domains.classroom import ClassroomFullError, ClassroomService
from schoolhub.domains.school import SchoolService
from schoolhub.domains.student import (
    ClassroomSchoolMismatchError,
    CrossSchoolTransferForbiddenError,
    PlacementInactiveError,
    StudentAlreadyInactiveError,
    StudentEmailExistsError,
    StudentInactiveError,
    StudentService,
    TransferTargetRequiredError,
)
from schoolhub.models.student import StudentCreateRequest, StudentUpdateRequest, TransferRequest

pytestmark = pytest.mark.integration


@pytest.fixture
async def school_x(create_school):
    return await create_school("Lincoln HS")


@pytest.fixture
async def school_y(create_school):
    return await create_school("Roosevelt HS")


class TestEnrollStudent:
    async def test_enroll_into_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        classroom_service: ClassroomService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id, capacity=2)

        student = await enroll(school_x.id, room.id, email="Ada@Example.com")

        assert student.is_active is True
        assert student.full_name == "Ada Lovelace"
        assert student.email == "ada@example.com"
        assert student.classroom_id == room.id
        seats = await classroom_service.get_classroom(room.id, superadmin)
        assert seats.available_seats == 1

    async def test_classroom_of_another_school(
        self,
        school_x,
        school_y,
        create_classroom,
        enroll,
    ) -> None:
        foreign_room = await create_classroom(school_y.id)

        with pytest.raises(ClassroomSchoolMismatchError):
            await enroll(school_x.id, foreign_room.id)

    async def test_inactive_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        classroom_service: ClassroomService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id)
        await classroom_service.delete_classroom(room.id, superadmin)

        with pytest.raises(PlacementInactiveError):
            await enroll(school_x.id, room.id)

    async def test_duplicate_email(self, school_x, enroll) -> None:
        await enroll(school_x.id, email="ada@example.com")

        with pytest.raises(StudentEmailExistsError):
            await enroll(school_x.id, first_name="Grace", email="ADA@example.com")

    async def test_school_admin_enrolls_into_own_school(
        self,
        school_x,
        admin_of,
        student_service: StudentService,
    ) -> None:
        student = await student_service.enroll_student(
            StudentCreateRequest(first_name="Ada", last_name="Lovelace"),
            admin_of(school_x.id),
        )

        assert student.school_id == school_x.id
        assert student.classroom_id is None


class TestListAndGet:
    async def test_listing_is_pinned_for_school_admin(
        self,
        school_x,
        school_y,
        enroll,
        admin_of,
        student_service: StudentService,
    ) -> None:
        own = await enroll(school_x.id, first_name="Ada")
        await enroll(school_y.id, first_name="Grace")

        page = await student_service.list_students(admin_of(school_x.id), school_id=school_y.id)

        assert [student.id for student in page.items] == [own.id]

    async def test_search_and_gender(
        self,
        school_x,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        await enroll(school_x.id, first_name="Ada", gender="female")
        await enroll(school_x.id, first_name="Alan", last_name="Turing", gender="male")

        by_name = await student_service.list_students(superadmin, search="turing")
        by_gender = await student_service.list_students(superadmin, gender="female")

        assert [student.first_name for student in by_name.items] == ["Alan"]
        assert [student.first_name for student in by_gender.items] == ["Ada"]

    async def test_foreign_student_is_hidden(
        self,
        school_x,
        school_y,
        enroll,
        admin_of,
        student_service: StudentService,
    ) -> None:
        foreign = await enroll(school_y.id)

        with pytest.raises(SchoolAccessDeniedError):
            await student_service.get_student(foreign.id, admin_of(school_x.id))

    async def test_detail_resolves_names(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id, "Room 7")
        student = await enroll(school_x.id, room.id)

        detail = await student_service.get_student(student.id, superadmin)

        assert detail.school_name == "Lincoln HS"
        assert detail.classroom_name == "Room 7"
        assert detail.transfer_history == []


class TestUpdateStudent:
    async def test_classroom_in_another_school(
        self,
        school_x,
        school_y,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        foreign_room = await create_classroom(school_y.id)
        student = await enroll(school_x.id)

        with pytest.raises(ClassroomSchoolMismatchError) as exc_info:
            await student_service.update_student(
                student.id, StudentUpdateRequest(classroom_id=foreign_room.id), superadmin
            )

        assert "transferStudent" in exc_info.value.message

    async def test_move_into_full_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        full_room = await create_classroom(school_x.id, "Room 1", capacity=1)
        await enroll(school_x.id, full_room.id, first_name="Ada")
        student = await enroll(school_x.id, first_name="Grace")

        with pytest.raises(ClassroomFullError):
            await student_service.update_student(
                student.id, StudentUpdateRequest(classroom_id=full_room.id), superadmin
            )

    async def test_partial_update(
        self,
        school_x,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        student = await enroll(school_x.id, guardian_name="Lord Byron")

        updated = await student_service.update_student(
            student.id, StudentUpdateRequest(last_name="King"), superadmin
        )

        assert updated.last_name == "King"
        assert updated.first_name == "Ada"
        assert updated.guardian_name == "Lord Byron"

    async def test_email_taken_by_another_student(
        self,
        school_x,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        await enroll(school_x.id, email="ada@example.com")
        student = await enroll(school_x.id, first_name="Grace", email="grace@example.com")

        with pytest.raises(StudentEmailExistsError):
            await student_service.update_student(
                student.id, StudentUpdateRequest(email="ADA@example.com"), superadmin
            )

    async def test_unenrolled_student_cannot_take_a_seat(
        self,
        school_x,
        create_classroom,
        enroll,
        classroom_service: ClassroomService,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id, capacity=1)
        student = await enroll(school_x.id, first_name="Ada")
        await student_service.delete_student(student.id, superadmin)

        with pytest.raises(StudentInactiveError):
            await student_service.update_student(
                student.id, StudentUpdateRequest(classroom_id=room.id), superadmin
            )

        await enroll(school_x.id, room.id, first_name="Grace")
        reactivated = await student_service.update_student(
            student.id, StudentUpdateRequest(is_active=True), superadmin
        )
        seats = await classroom_service.get_classroom(room.id, superadmin)

        assert reactivated.is_active is True
        assert reactivated.classroom_id is None
        assert seats.student_count == 1
        assert seats.available_seats == 0

    async def test_reactivate_into_full_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id, capacity=1)
        await enroll(school_x.id, room.id, first_name="Grace")
        student = await enroll(school_x.id, first_name="Ada")
        await student_service.delete_student(student.id, superadmin)

        with pytest.raises(ClassroomFullError):
            await student_service.update_student(
                student.id,
                StudentUpdateRequest(is_active=True, classroom_id=room.id),
                superadmin,
            )

    async def test_reactivate_under_inactive_school(
        self,
        school_x,
        enroll,
        school_service: SchoolService,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        student = await enroll(school_x.id)
        await student_service.delete_student(student.id, superadmin)
        await school_service.delete_school(school_x.id, superadmin)

        with pytest.raises(PlacementInactiveError):
            await student_service.update_student(
                student.id, StudentUpdateRequest(is_active=True), superadmin
            )

        assert (await student_service.get_student(student.id, superadmin)).is_active is False


class TestDeleteStudent:
    async def test_unenroll_frees_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id)
        student = await enroll(school_x.id, room.id)

        result = await student_service.delete_student(student.id, superadmin)

        assert result.message == "Student unenrolled successfully"
        assert result.student.is_active is False
        assert result.student.classroom_id is None

    async def test_twice(
        self,
        school_x,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        student = await enroll(school_x.id)
        await student_service.delete_student(student.id, superadmin)

        with pytest.raises(StudentAlreadyInactiveError):
            await student_service.delete_student(student.id, superadmin)


class TestTransferStudent:
    async def test_to_another_school_without_classroom(
        self,
        school_x,
        school_y,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room = await create_classroom(school_x.id, "Room 1")
        student = await enroll(school_x.id, room.id)

        result = await student_service.transfer_student(
            student.id,
            TransferRequest(to_school_id=school_y.id, reason="Family moved"),
            superadmin,
        )

        assert result.message == "Student transferred successfully"
        assert result.student.school_id == school_y.id
        assert result.student.classroom_id is None
        assert result.transfer.from_.school == "Lincoln HS"
        assert result.transfer.from_.classroom == "Room 1"
        assert result.transfer.to.school == "Roosevelt HS"
        assert result.transfer.to.classroom is None

        history = result.student.transfer_history
        assert len(history) == 1
        assert history[0].from_school == school_x.id
        assert history[0].to_school == school_y.id
        assert history[0].from_classroom == room.id
        assert history[0].to_classroom is None
        assert history[0].reason == "Family moved"

    async def test_history_accumulates_in_order(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        first = await create_classroom(school_x.id, "Room 1")
        second = await create_classroom(school_x.id, "Room 2")
        student = await enroll(school_x.id, first.id)

        await student_service.transfer_student(
            student.id, TransferRequest(to_classroom_id=second.id), superadmin
        )
        await student_service.transfer_student(
            student.id, TransferRequest(to_classroom_id=first.id), superadmin
        )

        history = await student_service.get_transfer_history(student.id)
        assert [record.sequence for record in history] == [1, 2]
        assert [record.to_classroom_id for record in history] == [second.id, first.id]

    async def test_full_target_classroom(
        self,
        school_x,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        full_room = await create_classroom(school_x.id, "Room 1", capacity=1)
        await enroll(school_x.id, full_room.id, first_name="Ada")
        student = await enroll(school_x.id, first_name="Grace")

        with pytest.raises(ClassroomFullError) as exc_info:
            await student_service.transfer_student(
                student.id, TransferRequest(to_classroom_id=full_room.id), superadmin
            )

        assert exc_info.value.message == "Target classroom is at full capacity"
        assert await student_service.get_transfer_history(student.id) == []

    async def test_requires_a_target(
        self,
        school_x,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        student = await enroll(school_x.id)

        with pytest.raises(TransferTargetRequiredError):
            await student_service.transfer_student(student.id, TransferRequest(), superadmin)

    async def test_classroom_outside_target_school(
        self,
        school_x,
        school_y,
        create_classroom,
        enroll,
        student_service: StudentService,
        superadmin: Actor,
    ) -> None:
        room_in_x = await create_classroom(school_x.id)
        student = await enroll(school_x.id)

        with pytest.raises(ClassroomSchoolMismatchError):
            await student_service.transfer_student(
                student.id,
                TransferRequest(to_school_id=school_y.id, to_classroom_id=room_in_x.id),
                superadmin,
            )

    async def test_school_admin_cannot_leave_school(
        self,
        school_x,
        school_y,
        enroll,
        admin_of,
        student_service: StudentService,
    ) -> None:
        student = await enroll(school_x.id)

        with pytest.raises(CrossSchoolTransferForbiddenError):
            await student_service.transfer_student(
                student.id, TransferRequest(to_school_id=school_y.id), admin_of(school_x.id)
            )

    async def test_school_admin_within_school(
        self,
        school_x,
        create_classroom,
        enroll,
        admin_of,
        student_service: StudentService,
    ) -> None:
        room = await create_classroom(school_x.id)
        student = await enroll(school_x.id)

        result = await student_service.transfer_student(
            student.id,
            TransferRequest(to_school_id=school_x.id, to_classroom_id=room.id),
            admin_of(school_x.id),
        )

        assert result.student.classroom_id == room.id
        assert result.transfer.from_.classroom is None

    @pytest.mark.parametrize("as_superadmin", [True, False])
    async def test_inactive_student(
        self,
        school_x,
        school_y,
        enroll,
        admin_of,
        student_service: StudentService,
        superadmin: Actor,
        as_superadmin: bool,
    ) -> None:
        student = await enroll(school_x.id)
        await student_service.delete_student(student.id, superadmin)
        actor = superadmin if as_superadmin else admin_of(school_x.id)

        with pytest.raises(StudentInactiveError):
            await student_service.transfer_student(
                student.id, TransferRequest(to_school_id=school_y.id), actor
            )
