"""
State carried through the couplet authoring workflow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from baakh.text.hesudhar import HesudharCorrection
from baakh.text.romanizer import RomanMapping


class WorkflowStep(str, Enum):
    HESUDHAR = 'hesudhar'
    ROMANIZER = 'romanizer'
    COUPLET_DETAILS = 'couplet-details'


STEP_ORDER = (WorkflowStep.HESUDHAR, WorkflowStep.ROMANIZER, WorkflowStep.COUPLET_DETAILS)


class NoticeLevel(str, Enum):
    SUCCESS = 'success'
    INFO = 'info'
    ERROR = 'error'


@dataclass
class Notification:
    level: NoticeLevel
    message: str
    # Blocking notices must be acknowledged; the rest can be dismissed
    blocking: bool = False


@dataclass
class Redirect:
    path: str
    delay: float


@dataclass
class CoupletDraft:
    slug: str = ''
    tags: List[str] = field(default_factory=list)
    poet_id: str = ''
    sindhi: str = ''
    english: str = ''


@dataclass
class WorkflowState:
    step: WorkflowStep = WorkflowStep.HESUDHAR

    # Step 1
    hesudhar_text: str = ''
    hesudhar_completed: bool = False
    corrections: List[HesudharCorrection] = field(default_factory=list)

    # Step 2
    roman_text: str = ''
    roman_completed: bool = False
    mappings: List[RomanMapping] = field(default_factory=list)
    words_not_in_dictionary: List[str] = field(default_factory=list)
    manual_romanizations: Dict[str, str] = field(default_factory=dict)

    # Step 3
    draft: CoupletDraft = field(default_factory=CoupletDraft)
    poets: List[dict] = field(default_factory=list)
    tags: List[dict] = field(default_factory=list)

    # Latest auto-fill request; replies carrying an older token are dropped
    autofill_token: int = 0

    notifications: List[Notification] = field(default_factory=list)
    redirect: Optional[Redirect] = None

    def notify(self, level, message, blocking=False):
        notice = Notification(NoticeLevel(level), message, blocking)
        self.notifications.append(notice)
        return notice

    def begin_autofill(self):
        self.autofill_token += 1
        return self.autofill_token

    def is_current(self, token):
        return token == self.autofill_token

    @property
    def last_notification(self):
        return self.notifications[-1] if self.notifications else None
