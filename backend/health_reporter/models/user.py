from sqlalchemy import Column, String
from health_reporter.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)   # UUID string, the session subject id
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(100), nullable=False)
