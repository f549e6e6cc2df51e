"""Unit tests for document models, ids and store paths."""

import re
from datetime import date

import pytest
from pydantic import ValidationError

from board_service.models import Board, Category, Contact, Priority, Task, TaskStatus, User
from board_service.storage.paths import StorePaths, namespace_key
from board_service.utils.ids import generate_unique_id, initials_for, random_color


class TestTaskStatus:
    """Tests for the status enumeration."""

    def test_canonical_values(self) -> None:
        """Test canonical serialization."""
        assert [s.value for s in TaskStatus] == ["todo", "inProgress", "awaitFeedback", "done"]

    @pytest.mark.parametrize("raw", ["inprogress", "INPROGRESS", "inProgress", " InProgress "])
    def test_parse_any_casing(self, raw: str) -> None:
        """Test tolerant parsing."""
        assert TaskStatus.parse(raw) is TaskStatus.IN_PROGRESS

    def test_parse_unknown_raises(self) -> None:
        """Test unknown statuses are rejected."""
        with pytest.raises(ValueError):
            TaskStatus.parse("archived")

    def test_labels(self) -> None:
        """Test display labels."""
        assert TaskStatus.AWAIT_FEEDBACK.label == "Await feedback"
        assert TaskStatus.TODO.label == "To do"


class TestTaskModel:
    """Tests for task document parsing."""

    def test_parses_stored_document(self) -> None:
        """Test camelCase documents with store quirks load."""
        task = Task.model_validate(
            {
                "id": "1700000000000abcdefghi",
                "title": "Plan sprint",
                "description": None,
                "dueDate": "2030-07-01",
                "priority": "urgent",
                "category": "user story",
                "subtasks": {"0": {"text": "a", "completed": True}, "2": {"text": "b"}},
                "status": "inprogress",
            }
        )

        assert task.description == ""
        assert task.due_date == date(2030, 7, 1)
        assert task.priority == Priority.URGENT
        assert task.category == Category.USER_STORY
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.contacts == []
        assert [s.text for s in task.subtasks] == ["a", "b"]

    def test_unknown_priority_falls_back_to_medium(self) -> None:
        """Test tolerant priority parsing."""
        task = Task(title="x", category="Technical Task", priority="critical")

        assert task.priority == Priority.MEDIUM

    def test_rejects_unknown_category(self) -> None:
        """Test category is a closed set."""
        with pytest.raises(ValidationError):
            Task(title="x", category="Bug")

    def test_document_round_trip_uses_aliases(self) -> None:
        """Test serialization uses stored key names and keeps unknown keys."""
        task = Task.model_validate(
            {"title": "x", "category": "Technical Task", "dueDate": "2030-01-02", "legacy": 1}
        )

        document = task.to_document()

        assert document["dueDate"] == "2030-01-02"
        assert document["status"] == "todo"
        assert document["legacy"] == 1


class TestBoardModel:
    """Tests for board parsing."""

    def test_missing_arrays_default_to_empty(self) -> None:
        """Test absent keys are empty lists."""
        board = Board.model_validate({"done": [{"title": "x", "category": "User Story", "status": "done"}]})

        assert board.todo == []
        assert board.in_progress == []
        assert board.await_feedback == []
        assert len(board.done) == 1

    def test_status_aligned_with_containing_array(self) -> None:
        """Test a mislabelled task takes its array's status."""
        board = Board.model_validate(
            {"awaitFeedback": [{"title": "x", "category": "User Story", "status": "todo"}]}
        )

        assert board.await_feedback[0].status == TaskStatus.AWAIT_FEEDBACK

    def test_user_without_board(self) -> None:
        """Test a user document without board or contacts loads."""
        user = User.model_validate({"name": "Sofia", "email": "s@example.com", "password": "pw"})

        assert user.board.all_tasks() == []
        assert user.contacts == []
        assert "id" not in user.to_document()
        assert "pw" not in repr(user)


class TestContactModel:
    """Tests for contact parsing."""

    def test_initials_derived_when_missing(self) -> None:
        """Test initials follow the name on load."""
        contact = Contact.model_validate({"id": "c1", "name": "Jan van Dijk", "number": 1512345})

        assert contact.initials == "JD"
        assert contact.number == "1512345"

    def test_rename_refreshes_initials(self) -> None:
        """Test renaming keeps id and color."""
        contact = Contact(id="c1", name="Jan Dijk", color="#123456")

        contact.rename("Eva Roth")

        assert (contact.id, contact.initials, contact.color) == ("c1", "ER", "#123456")

    def test_missing_id_and_color_stay_blank_across_loads(self) -> None:
        """Test a stored copy without id or color is not given new ones."""
        document = {"name": "Jan Dijk", "email": "jan@example.com"}

        first = Contact.model_validate(document)
        second = Contact.model_validate(document)

        assert (first.id, first.color) == ("", "")
        assert first.to_document() == second.to_document()


class TestIds:
    """Tests for identifier helpers."""

    def test_unique_id_shape(self) -> None:
        """Test ids are a millisecond timestamp plus nine base-36 chars."""
        assert re.fullmatch(r"\d{13}[a-z0-9]{9}", generate_unique_id())

    def test_unique_ids_differ(self) -> None:
        """Test consecutive ids differ."""
        assert len({generate_unique_id() for _ in range(100)}) == 100

    def test_random_color(self) -> None:
        """Test colors are six-digit hex."""
        assert re.fullmatch(r"#[0-9a-f]{6}", random_color())

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("Anna Maria Weber", "AW"), ("cher", "C"), ("  ", ""), ("eva roth", "ER")],
    )
    def test_initials(self, name: str, expected: str) -> None:
        """Test initials derivation."""
        assert initials_for(name) == expected


class TestStorePaths:
    """Tests for store addressing."""

    def test_namespace_key_strips_punctuation(self) -> None:
        """Test only word characters and whitespace survive."""
        assert namespace_key("john.doe@mail.com") == "johndoemailcom"
        assert namespace_key("guest@example.com") == "guestexamplecom"
        assert namespace_key("a_b+c@x-y.de") == "a_bcxyde"

    def test_punctuation_variants_collide(self) -> None:
        """Test emails differing only in punctuation share a namespace."""
        assert namespace_key("jo.hn@mail.com") == namespace_key("john@mail.com")

    def test_paths(self) -> None:
        """Test every path hangs off the user document."""
        paths = StorePaths.for_email("john.doe@mail.com", "-abc")

        assert paths.user() == "users/johndoemailcom/-abc"
        assert paths.contacts() == "users/johndoemailcom/-abc/contacts"
        assert paths.status(TaskStatus.AWAIT_FEEDBACK) == "users/johndoemailcom/-abc/board/awaitFeedback"
        assert paths.task(TaskStatus.TODO, 1) == "users/johndoemailcom/-abc/board/todo/1"
