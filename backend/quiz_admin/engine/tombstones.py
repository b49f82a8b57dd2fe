import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)


class TombstoneTracker:
    """
    Identities of persisted questions and choices removed during a session.

    Choice tombstones are filed under the id of their parent question so
    the compiler can attach them to that question's choice list. Once a
    question is tombstoned the backend deletes its choices along with it,
    so choice tombstones for that question are dropped and never recorded
    again.
    """

    def __init__(self):
        # dict keeps insertion order and doubles as an ordered set
        self._questions: Dict[int, None] = {}
        self._choices: Dict[int, List[int]] = {}

    def record_question_deleted(self, question_id: int) -> None:
        self._questions[question_id] = None
        dropped = self._choices.pop(question_id, None)
        if dropped:
            logger.debug("Question %s tombstoned; dropping choice tombstones %s", question_id, dropped)

    def record_choice_deleted(self, parent_question_id: int, choice_id: int) -> None:
        if parent_question_id in self._questions:
            logger.debug(
                "Ignoring choice %s tombstone: parent question %s already tombstoned",
                choice_id,
                parent_question_id,
            )
            return
        recorded = self._choices.setdefault(parent_question_id, [])
        if choice_id not in recorded:
            recorded.append(choice_id)

    def question_tombstones(self) -> Tuple[int, ...]:
        """Tombstoned question ids, in the order they were removed."""
        return tuple(self._questions)

    def choice_tombstones_for(self, parent_question_id: int) -> Tuple[int, ...]:
        return tuple(self._choices.get(parent_question_id, ()))

    def is_empty(self) -> bool:
        return not self._questions and not self._choices

    def clear(self) -> None:
        self._questions.clear()
        self._choices.clear()

    def __len__(self) -> int:
        return len(self._questions) + sum(len(ids) for ids in self._choices.values())
