from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def build_engine(url, echo: bool = False, **options) -> Engine:
    """
    Create the engine a storage adapter owns for its whole lifetime.

    ``options`` carries the driver specific pool and connect arguments.
    """
    return create_engine(
        url,
        # Test connection before using (detect disconnects)
        pool_pre_ping=True,
        # SQL echo - useful for debugging
        echo=echo,
        **options
    )


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,  # Don't auto-commit transactions
        autoflush=False,   # Don't auto-flush before queries
        bind=engine,
        expire_on_commit=False  # Don't expire objects after commit
    )


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_students_table(engine: Engine):
    """
    Create the students table if it is missing.

    Courses and enrollments are left to the Alembic migrations.
    """
    # Register the models on Base.metadata
    from student_api.models.student import Student

    Base.metadata.create_all(bind=engine, tables=[Student.__table__])
    logger.info("Ensured 'students' table")


def check_database_connection(engine: Engine):
    """
    Round-trip probe against the database.

    Raises the driver error when the connection cannot be used.
    """
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
