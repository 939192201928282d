from storefront.db.base import Base
from storefront.db.session import engine
import storefront.db.models  # noqa


def init_db():
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    init_db()
