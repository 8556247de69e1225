"""In-process registry of live onboarding flows."""

import logging

from craftstory.core.exceptions import FlowNotFoundError
from craftstory.core.languages import require_language
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.onboarding.flow import OnboardingFlow
from craftstory.services.storage.profile_store import BaseProfileStore
from craftstory.services.synthesis.base import BaseTTS
from craftstory.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class FlowRegistry:
    """Creates flows with shared adapters and tracks them by ID.

    Flows do not share state with each other; the registry only hands out
    references. One instance lives on ``app.state``.

    A completed flow is handed out one last time by ``get`` and then
    forgotten. Completed flows nobody asked for again are pruned whenever a
    new flow is created.
    """

    def __init__(
        self,
        stt: BaseSTT,
        extractor: BaseExtractor,
        store: BaseProfileStore,
        tts: BaseTTS | None = None,
        default_language: str = "en",
    ) -> None:
        self._stt = stt
        self._extractor = extractor
        self._store = store
        self._tts = tts
        self._default_language = default_language
        self._flows: dict[str, OnboardingFlow] = {}

    def __len__(self) -> int:
        return len(self._flows)

    def create(self, profile_id: str, language: str | None = None) -> OnboardingFlow:
        """Start a new flow in the intro stage.

        Raises:
            UnsupportedLanguageError: If *language* is not supported.
        """
        lang = require_language(language or self._default_language).code
        self._prune()
        flow = OnboardingFlow(
            profile_id=profile_id,
            language=lang,
            stt=self._stt,
            extractor=self._extractor,
            store=self._store,
            tts=self._tts,
        )
        self._flows[flow.id] = flow
        logger.info("Created onboarding flow %s for profile %s (%s)", flow.id, profile_id, lang)
        return flow

    def get(self, flow_id: str) -> OnboardingFlow:
        """Return a live flow or raise :class:`FlowNotFoundError`.

        A completed flow is removed as it is returned, so the caller still
        sees its final state but later lookups fail.
        """
        flow = self._flows.get(flow_id)
        if flow is None:
            raise FlowNotFoundError(flow_id)
        if flow.is_complete:
            del self._flows[flow_id]
            logger.debug("Evicted completed onboarding flow %s", flow_id)
        return flow

    def discard(self, flow_id: str) -> None:
        """Abandon and forget a flow."""
        flow = self._flows.pop(flow_id, None)
        if flow is None:
            raise FlowNotFoundError(flow_id)
        flow.abandon()

    def _prune(self) -> None:
        done = [flow_id for flow_id, flow in self._flows.items() if flow.is_complete]
        for flow_id in done:
            del self._flows[flow_id]
        if done:
            logger.debug("Pruned %d completed onboarding flows", len(done))
