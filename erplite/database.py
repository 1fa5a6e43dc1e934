"""Database configuration and initialization."""
import uuid
from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()

# Global session and engine
engine = None
db_session = None


def _engine_options(database_uri, echo):
    """Pool options per backend (SQLite does not take a QueuePool config)."""
    if database_uri.startswith('sqlite'):
        return {
            'echo': echo,
            'connect_args': {'check_same_thread': False},
            'poolclass': StaticPool,
        }
    return {
        'echo': echo,
        'pool_pre_ping': True,  # Enable connection health checks
        'pool_size': 10,
        'max_overflow': 20,
    }


def init_db(app):
    """Initialize database connection."""
    global engine, db_session

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine = create_engine(
        database_uri,
        **_engine_options(database_uri, app.config.get('SQLALCHEMY_ECHO', False))
    )

    if engine.dialect.name == 'sqlite':
        @event.listens_for(engine, 'connect')
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_schema():
    """Create all tables known to the models package."""
    # Importing the package registers every model on Base.metadata
    import erplite.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_schema():
    """Drop all tables (used by the test suite)."""
    import erplite.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def get_session():
    """Get database session."""
    return db_session


def new_id():
    """Opaque primary key for every table (UUID4 text)."""
    return str(uuid.uuid4())
