"""
Скрипт: создание таблиц и админа из ENV, если не существует
Запуск: python -m sale_engine.scripts.init_db
"""
import logging
from sqlmodel import SQLModel, Session, select
from sale_engine.db.session import engine
from sale_engine.models.user import User, UserRole, UserGroup
from sale_engine.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_GROUPS = [
    ("Customers", "customers"),
    ("Wholesale", "wholesale"),
]


def create_tables():
    """Создание всех таблиц"""
    # Регистрируем модели в metadata
    import sale_engine.models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def seed_admin():
    """Создание админа если не существует"""
    admin_email = settings.ADMIN_EMAIL
    
    if not admin_email:
        logger.info("ADMIN_EMAIL not set, skipping admin seed")
        return
    
    with Session(engine) as session:
        existing = session.exec(select(User).where(User.email == admin_email)).first()
        
        if existing:
            logger.info(f"Admin already exists: {existing.email}")
            return
        
        admin = User(
            email=admin_email,
            first_name="Admin",
            role=UserRole.ADMIN,
            is_active=True
        )
        session.add(admin)
        session.commit()
        logger.info(f"Admin created: {admin_email}")


def seed_user_groups():
    """Группы покупателей по умолчанию"""
    with Session(engine) as session:
        for name, handle in DEFAULT_GROUPS:
            existing = session.exec(select(UserGroup).where(UserGroup.handle == handle)).first()
            if existing:
                continue
            session.add(UserGroup(name=name, handle=handle))
        session.commit()


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info("Creating tables...")
    create_tables()
    logger.info("Seeding admin...")
    seed_admin()
    logger.info("Seeding user groups...")
    seed_user_groups()
    logger.info("Done!")


if __name__ == "__main__":
    main()
