import unittest

from peekabow.application.pipeline_selector import select_pipeline
from peekabow.domain.models import Board, IssueRef, Pipeline


def _pipeline(name, *numbers):
    return Pipeline(name=name, issues=[IssueRef(issue_number=n) for n in numbers])


class TestSelectPipeline(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board(pipelines=[
            _pipeline("Backlog", 1, 2),
            _pipeline("In Progress", 7, 8),
            _pipeline("In Progress", 99),
            _pipeline("Done"),
        ])

    def test_returns_matching_pipeline(self) -> None:
        pipeline, found = select_pipeline(self.board, "Backlog")

        self.assertTrue(found)
        self.assertEqual(list(pipeline.issue_numbers()), [1, 2])

    def test_first_match_wins_for_duplicate_names(self) -> None:
        pipeline, found = select_pipeline(self.board, "In Progress")

        self.assertTrue(found)
        self.assertEqual(list(pipeline.issue_numbers()), [7, 8])

    def test_match_is_case_sensitive(self) -> None:
        pipeline, found = select_pipeline(self.board, "in progress")

        self.assertFalse(found)
        self.assertIsNone(pipeline)

    def test_absent_name_is_not_found(self) -> None:
        self.assertEqual(select_pipeline(self.board, "Review/QA"), (None, False))

    def test_empty_board_is_not_found(self) -> None:
        self.assertEqual(select_pipeline(Board(pipelines=[]), "Backlog"), (None, False))

    def test_empty_pipeline_is_still_found(self) -> None:
        pipeline, found = select_pipeline(self.board, "Done")

        self.assertTrue(found)
        self.assertEqual(pipeline.issues, [])
