"""
Couplet authoring workflow.

Three linear steps: hesudhar check, romanizer check, couplet details. The
controller holds no state of its own; every operation takes a
``WorkflowState``, updates it and returns it. Service failures never raise
out of an operation: they are logged and reported as notifications on the
state, and the step does not advance.
"""

import structlog

from baakh.errors import ServiceError
from baakh.text.hesudhar import HesudharCorrection
from baakh.text.normalizer import distinct_words, first_line, nfc, normalize_whitespace, replace_word, slugify
from baakh.text.romanizer import RomanMapping
from baakh.workflow.state import STEP_ORDER, NoticeLevel, Redirect, WorkflowState, WorkflowStep

logger = structlog.get_logger(__name__)

COUPLETS_PAGE = '/admin/poetry/couplets'
REDIRECT_DELAY = 1.5


class CoupletWorkflow:
    def __init__(self, client):
        self.client = client

    def start(self, state=None):
        """Fresh state with the poet and tag lists loaded."""
        state = state or WorkflowState()
        try:
            state.poets = self.client.list_poets(limit=100)
        except ServiceError as e:
            logger.warning("poets_load_failed", error=e.message)
            state.notify(NoticeLevel.ERROR, 'Failed to load poets')
        try:
            state.tags = self.client.list_tags()
        except ServiceError as e:
            logger.warning("tags_load_failed", error=e.message)
            state.notify(NoticeLevel.ERROR, 'Failed to load topic tags')
        return state

    # Step 1: hesudhar

    def set_hesudhar_text(self, state, text):
        """Editing the text invalidates an earlier check."""
        if text != state.hesudhar_text:
            state.hesudhar_text = text
            state.hesudhar_completed = False
            state.corrections = []
        return state

    def check_hesudhar(self, state):
        text = state.hesudhar_text
        if not text.strip():
            state.notify(NoticeLevel.ERROR, 'Please enter text to check', blocking=True)
            return state

        try:
            result = self.client.correct_hesudhar(text)
        except ServiceError as e:
            logger.warning("hesudhar_check_failed", error=e.message)
            state.notify(NoticeLevel.ERROR, 'Error checking hesudhar')
            return state

        state.corrections = [HesudharCorrection.from_dict(c) for c in result.get('corrections') or []]
        corrected = result.get('correctedText')
        if corrected is not None and state.corrections:
            state.hesudhar_text = corrected
            state.notify(NoticeLevel.SUCCESS, f'Applied {len(state.corrections)} hesudhar corrections!')
        else:
            state.hesudhar_text = corrected if corrected is not None else nfc(text)
            state.notify(NoticeLevel.SUCCESS, 'No hesudhar corrections needed!')
        state.hesudhar_completed = True
        return state

    # Step 2: romanizer

    def check_romanizer(self, state):
        # The server compares NFC forms; so must the pending-word list
        text = nfc(state.roman_text)
        if not text.strip():
            state.notify(NoticeLevel.ERROR, 'Please enter text to check', blocking=True)
            return state

        try:
            result = self.client.romanize(text)
        except ServiceError as e:
            logger.warning("romanizer_check_failed", error=e.message)
            state.notify(NoticeLevel.ERROR, 'Error checking romanizer')
            return state

        state.mappings = [RomanMapping.from_dict(m) for m in result.get('mappings') or []]
        romanized = result.get('romanizedText')
        if romanized and romanized != text:
            state.roman_text = romanized
            state.notify(NoticeLevel.SUCCESS, f'Applied {len(state.mappings)} romanizations!')
        else:
            state.roman_text = text
            state.notify(NoticeLevel.SUCCESS, 'No romanizations needed!')

        known = {m.sindhi_word for m in state.mappings} | set(state.manual_romanizations)
        state.words_not_in_dictionary = [w for w in distinct_words(text) if w not in known]
        state.roman_completed = True
        return state

    def add_romanization(self, state, word, roman):
        word = nfc(word).strip()
        roman = (roman or '').strip()
        if not word or not roman:
            state.notify(NoticeLevel.ERROR, 'Please enter a romanization', blocking=True)
            return state

        try:
            self.client.add_roman_word(word, roman)
        except ServiceError as e:
            logger.warning("add_romanization_failed", word=word, error=e.message)
            state.notify(NoticeLevel.ERROR, 'Failed to add romanization')
            return state

        state.manual_romanizations[word] = roman
        state.words_not_in_dictionary = [w for w in state.words_not_in_dictionary if w != word]
        state.mappings.append(RomanMapping(word, roman))
        state.roman_text = replace_word(nfc(state.roman_text), word, roman)
        state.notify(NoticeLevel.SUCCESS, f'Added new romanization: {word} → {roman}')
        return state

    # Navigation

    def can_proceed(self, state):
        if state.step == WorkflowStep.HESUDHAR:
            return state.hesudhar_completed
        if state.step == WorkflowStep.ROMANIZER:
            return state.roman_completed
        draft = state.draft
        return bool(draft.slug.strip() and str(draft.poet_id).strip() and draft.sindhi.strip())

    def next_step(self, state):
        if state.step == WorkflowStep.COUPLET_DETAILS or not self.can_proceed(state):
            return state

        if state.step == WorkflowStep.HESUDHAR:
            text = state.hesudhar_text
            state.roman_text = text
            state.draft.sindhi = text.strip()
            self.regenerate_draft(state, text)
        elif state.step == WorkflowStep.ROMANIZER:
            self._sync_dictionary(state)

        state.step = STEP_ORDER[STEP_ORDER.index(state.step) + 1]
        return state

    def prev_step(self, state):
        index = STEP_ORDER.index(state.step)
        if index > 0:
            state.step = STEP_ORDER[index - 1]
        return state

    def _sync_dictionary(self, state):
        state.notify(NoticeLevel.INFO, 'Syncing romanizer file to include new words...')
        try:
            result = self.client.sync_romanizer()
        except ServiceError as e:
            logger.warning("romanizer_sync_failed", error=e.message)
            state.notify(NoticeLevel.ERROR, 'Error syncing romanizer file')
            return
        if result.get('success') and result.get('newEntries', 0) > 0:
            state.notify(NoticeLevel.SUCCESS, f"Romanizer synced! {result['newEntries']} new entries available")
        else:
            state.notify(NoticeLevel.SUCCESS, 'Romanizer file is up to date')

    # Slug and English draft

    def request_autofill(self, state, text):
        """
        Romanize ``text`` for the slug and English draft.

        Returns ``(token, slug, english)``. ``english`` is None when the
        full-text romanization failed. Nothing is written to the state here;
        ``apply_autofill`` does that if the token is still current.
        """
        token = state.begin_autofill()
        line = first_line(text)
        slug = slugify(line)
        english = None
        try:
            if line:
                romanized = self.client.romanize(line).get('romanizedText')
                if romanized:
                    slug = slugify(romanized)
            if text.strip():
                english = self.client.romanize(text.strip()).get('romanizedText') or None
        except ServiceError as e:
            logger.info("autofill_fallback", error=e.message)
        return token, slug, english

    def apply_autofill(self, state, token, slug, english):
        if not state.is_current(token):
            logger.debug("autofill_discarded", token=token, current=state.autofill_token)
            return state
        state.draft.slug = slug
        if english is not None:
            state.draft.english = english
        return state

    def regenerate_draft(self, state, text):
        return self.apply_autofill(state, *self.request_autofill(state, text))

    # Step 3: couplet details

    def edit_sindhi_text(self, state, text):
        state.draft.sindhi = text
        if text.strip():
            self.regenerate_draft(state, text)
        return state

    def set_details(self, state, slug=None, poet_id=None, tags=None, english=None):
        draft = state.draft
        if slug is not None:
            draft.slug = slug
        if poet_id is not None:
            draft.poet_id = str(poet_id)
        if tags is not None:
            draft.tags = list(tags)
        if english is not None:
            draft.english = english
        return state

    def _validation_error(self, state):
        draft = state.draft
        if state.step != WorkflowStep.COUPLET_DETAILS:
            return 'Complete the hesudhar and romanizer steps first'
        if not draft.slug.strip():
            return 'Couplet slug is required'
        if not str(draft.poet_id).strip():
            return 'Poet selection is required'
        if not draft.sindhi.strip():
            return 'Sindhi couplet text is required'
        try:
            poet_id = int(str(draft.poet_id).strip())
        except ValueError:
            return 'Invalid poet ID'
        if poet_id <= 0:
            return 'Invalid poet ID'
        return None

    def create_couplet(self, state):
        error = self._validation_error(state)
        if error:
            state.notify(NoticeLevel.ERROR, error, blocking=True)
            return state

        draft = state.draft
        record = {
            'poetry_id': 0,
            'poet_id': int(str(draft.poet_id).strip()),
            'couplet_slug': draft.slug.strip(),
            'couplet_tags': ', '.join(draft.tags),
            'couplet_text': normalize_whitespace(draft.sindhi).strip(),
            'lang': 'sd',
        }

        try:
            self.client.create_couplets([record])
        except ServiceError as e:
            logger.error("couplet_create_failed", slug=record['couplet_slug'], error=e.message)
            state.notify(NoticeLevel.ERROR, e.message or 'Error creating couplet', blocking=True)
            return state

        english = normalize_whitespace(draft.english).strip()
        if english:
            try:
                self.client.create_couplets([{**record, 'couplet_text': english, 'lang': 'en'}])
            except ServiceError as e:
                logger.warning("english_couplet_failed", slug=record['couplet_slug'], error=e.message)

        logger.info("couplet_created", slug=record['couplet_slug'], poet_id=record['poet_id'],
                    english=bool(english))
        state.notify(NoticeLevel.SUCCESS, 'Couplet created successfully!')
        state.redirect = Redirect(COUPLETS_PAGE, REDIRECT_DELAY)
        return state
