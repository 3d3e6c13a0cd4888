from core.ranking.service import RankingService

__all__ = ['RankingService']
