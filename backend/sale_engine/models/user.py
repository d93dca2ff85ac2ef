from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from enum import Enum

if TYPE_CHECKING:
    from .order import Order


class UserRole(str, Enum):
    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"


class UserGroupMember(SQLModel, table=True):
    __tablename__ = "user_group_members"
    
    user_id: int = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    user_group_id: int = Field(foreign_key="user_groups.id", primary_key=True, ondelete="CASCADE")


class UserGroup(SQLModel, table=True):
    __tablename__ = "user_groups"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    handle: str = Field(unique=True, index=True)
    
    # Relationships
    users: List["User"] = Relationship(back_populates="groups", link_model=UserGroupMember)


class User(SQLModel, table=True):
    __tablename__ = "users"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    email: Optional[str] = Field(default=None, unique=True, index=True)
    
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    
    role: UserRole = Field(default=UserRole.CUSTOMER)
    is_active: bool = Field(default=True)
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    
    # Relationships
    groups: List["UserGroup"] = Relationship(back_populates="users", link_model=UserGroupMember)
    orders: List["Order"] = Relationship(back_populates="user")
