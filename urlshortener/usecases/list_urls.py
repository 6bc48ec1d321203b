import logging

from urlshortener.models import ShortURLStatsModel
from urlshortener.dao.base import ShortURLBaseDAO


logger = logging.getLogger(__name__)


class ListURLsUseCase:
    """List every short URL record with its visit count, newest first"""

    def __init__(self, short_url_dao: ShortURLBaseDAO):
        self.short_url_dao = short_url_dao

    def execute(self) -> list[ShortURLStatsModel]:
        stats = [
            ShortURLStatsModel(short_url=short_url, visits=self.short_url_dao.count_visits(short_url.shortcode))
            for short_url in self.short_url_dao.find_all()
        ]
        logger.debug('Listed short URLs.', extra={'count': len(stats)})
        return stats
