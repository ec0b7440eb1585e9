from contextlib import asynccontextmanager
import logging

from resume_tailor.core.config import get_scoring_config
from resume_tailor.tailoring.rules import get_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Config errors should stop startup, not the first request.
    get_scoring_config()
    rules = get_rules()
    logger.info("tailoring_engine_ready rules=%s", len(rules))
    yield
