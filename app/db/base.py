# app/db/base.py
# Import all the models, so that Base has them before create_all() runs
from app.db.base_class import Base
from app.schemas.category import Category
from app.schemas.validated_word import ValidatedWord
from app.schemas.game_stats import GameStatistics
from app.schemas.system import SystemAlert
# Import other models here
