from typing import Optional, Tuple

from peekabow.domain.models import Board, Pipeline


def select_pipeline(board: Board, name: str) -> Tuple[Optional[Pipeline], bool]:
    """
    Returns the first pipeline whose name equals `name` exactly (case-sensitive).

    ZenHub does not enforce unique pipeline names; later duplicates are never
    seen. A missing pipeline is a normal outcome, reported as (None, False).
    """
    for pipeline in board.pipelines:
        if pipeline.name == name:
            return pipeline, True
    return None, False
