from sqlalchemy import Boolean, Column, String
from smartsync.database import Base

DEFAULT_PRIMARY_COLOR = "#059669"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False)

    # branding, only writable while is_premium
    brand_name = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    primary_color = Column(String, nullable=True, default=DEFAULT_PRIMARY_COLOR)
    custom_domain = Column(String, nullable=True)
