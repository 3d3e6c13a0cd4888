from dataclasses import dataclass
from typing import Optional

from core.config_loader import AppConfig
from core.chat.gate import ChatGate
from core.exam.service import ExamService
from core.intents import IntentService
from core.lifecycle.service import LifecycleService
from core.matcher.service import MatchService
from core.ranking.service import RankingService
from core.scorer import ScoringService
from database.repository import MatchRepositoryHub
from notification.service import NotificationService


@dataclass
class Services:
    """Services bound to one repository hub (one transaction)."""
    matches: MatchService
    lifecycle: LifecycleService
    exams: ExamService
    ranking: RankingService
    chat: ChatGate
    intents: IntentService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Holds only session-independent objects. DB-bound services are built per
    unit of work via services_for(repo), so every read and write of a request
    shares one transaction.
    """
    config: AppConfig
    scoring_service: ScoringService
    notification_service: Optional[NotificationService] = None

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        scoring_service = ScoringService(config.scorer)

        # Notification Service (only if enabled)
        notification_service = None
        if config.notifications and config.notifications.enabled:
            notification_service = NotificationService(config.notifications)

        return cls(
            config=config,
            scoring_service=scoring_service,
            notification_service=notification_service
        )

    def services_for(self, repo: MatchRepositoryHub) -> Services:
        """Wire every DB-bound service for one repository hub."""
        notifier = self.notification_service
        lifecycle = LifecycleService(repo, notifier=notifier)
        matches = MatchService(repo, scorer=self.scoring_service)
        return Services(
            matches=matches,
            lifecycle=lifecycle,
            exams=ExamService(repo, lifecycle=lifecycle, config=self.config.exam, notifier=notifier),
            ranking=RankingService(repo, config=self.config.ranking),
            chat=lifecycle.chat_gate,
            intents=IntentService(repo, matches, lifecycle, config=self.config.intents),
        )
