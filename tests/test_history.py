"""Tests for the single-slot history."""

from osh.history import RECALL, History


class TestHistory:
    def test_starts_empty(self):
        assert History().recall() is None

    def test_record_and_recall(self):
        history = History()
        history.record("ls -al")
        assert history.recall() == "ls -al"

    def test_overwrites_previous(self):
        history = History()
        history.record("ls")
        history.record("pwd")
        assert history.recall() == "pwd"

    def test_ignores_empty(self):
        history = History()
        history.record("ls")
        history.record("")
        assert history.recall() == "ls"

    def test_ignores_recall(self):
        history = History()
        history.record("ls")
        history.record(RECALL)
        assert history.recall() == "ls"

    def test_recall_is_repeatable(self):
        history = History()
        history.record("ls")
        assert history.recall() == history.recall() == "ls"

    def test_instances_are_independent(self):
        a = History()
        b = History()
        a.record("ls")
        assert b.recall() is None
