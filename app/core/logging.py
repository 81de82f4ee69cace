import logging

from app.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logging(level: str = None):
    """Configurar el logger raíz de la aplicación"""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT
    )
    # SQLAlchemy ya tiene su propio echo controlado por settings.debug
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
