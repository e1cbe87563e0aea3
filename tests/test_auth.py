"""
Tests for PasswordAuthorizer.
"""
from booklist.auth import PASSWORD_CHECK_ERROR, PasswordAuthorizer

from conftest import FakeStore, run


def prompt_with(value):
    async def prompt():
        return value
    return prompt


class TestPasswordAuthorizer:
    """Test cases for the password gate."""

    def test_valid_password(self):
        store = FakeStore()
        assert run(PasswordAuthorizer(store, prompt_with("secret"))()) is True
        assert store.calls == [("check_password", "secret")]

    def test_invalid_password(self):
        store = FakeStore()
        assert run(PasswordAuthorizer(store, prompt_with("wrong"))()) is False

    def test_cancelled_prompt_sends_nothing(self):
        for value in (None, ""):
            store = FakeStore()
            assert run(PasswordAuthorizer(store, prompt_with(value))()) is False
            assert store.calls == []

    def test_check_failure_is_reported(self):
        store = FakeStore()
        store.fail.add("check_password")
        reports = []

        granted = run(PasswordAuthorizer(store, prompt_with("secret"), report=reports.append)())

        assert granted is False
        assert reports == [PASSWORD_CHECK_ERROR]

    def test_check_failure_without_reporter(self):
        store = FakeStore()
        store.fail.add("check_password")
        assert run(PasswordAuthorizer(store, prompt_with("secret"))()) is False
