from sqlalchemy import Boolean, Column, String, Enum, UniqueConstraint
from app.core.database import Base
from app.core.constants import UserRoleEnum
from app.models.base import TenantEntity

class User(TenantEntity, Base):
    __tablename__ = "users"
    # Emails are unique per organization; the same address may exist in another tenant.
    __table_args__ = (
        UniqueConstraint("organization_id", "email", name="uq_users_organization_email"),
    )

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, index=True, nullable=False)
    role = Column(Enum(UserRoleEnum), nullable=False, default=UserRoleEnum.STUDENT)
    is_active = Column(Boolean(), nullable=False, default=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
