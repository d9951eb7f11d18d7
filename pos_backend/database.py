from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from pos_backend.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

execution_options = {}
if settings.DB_ISOLATION_LEVEL:
    execution_options["isolation_level"] = settings.DB_ISOLATION_LEVEL

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    execution_options=execution_options,
    echo=settings.SQL_ECHO,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def supports_transactions(bind: Engine | Connection) -> bool:
    """Whether ``bind`` can run a multi-statement transaction right now.

    Looks only at the handle it is given, so callers probe once per unit of
    work instead of caching the answer. An engine or connection configured
    for ``AUTOCOMMIT`` commits every statement on its own and cannot roll
    back a partially applied sequence.
    """
    level = bind.get_execution_options().get("isolation_level")
    if level is None:
        level = getattr(bind.dialect, "isolation_level", None)
    return (level or "").upper() != "AUTOCOMMIT"


def init_db(bind: Engine | None = None):
    # Import all models so Base.metadata knows about them
    import pos_backend.models.category  # noqa: F401
    import pos_backend.models.order  # noqa: F401
    import pos_backend.models.product  # noqa: F401
    import pos_backend.models.purchase  # noqa: F401
    import pos_backend.models.sales_return  # noqa: F401
    import pos_backend.models.stock_movement  # noqa: F401
    import pos_backend.models.supplier  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
