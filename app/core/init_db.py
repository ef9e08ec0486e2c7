from loguru import logger
from app.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from app.models.profile import Profile
from app.models.partner_preference import PartnerPreference
from app.modules.connections.models import Interest, Conversation, Message
from app.modules.favorites.models import Favorite
from app.modules.notifications.models import Notification

def init_db():
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
