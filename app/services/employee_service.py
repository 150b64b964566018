"""
Employee (profile) management service layer
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from typing import List
from fastapi import HTTPException, status
import logging

from app.models import Profile
from app.schemas.base import UserRole

logger = logging.getLogger(__name__)


class EmployeeService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_employees(self, admin: Profile) -> List[Profile]:
        stmt = (
            select(Profile)
            .where(Profile.organization_id == admin.organization_id)
            .order_by(Profile.full_name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_role(self, admin: Profile, profile_id: str, role: UserRole) -> Profile:
        """Change an employee's role within the admin's own organization"""
        stmt = select(Profile).where(and_(
            Profile.id == profile_id,
            Profile.organization_id == admin.organization_id
        ))
        result = await self.db.execute(stmt)
        employee = result.scalar_one_or_none()

        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )

        if employee.id == admin.id and role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot remove your own admin access"
            )

        employee.role = role.value
        await self.db.commit()
        await self.db.refresh(employee)

        logger.info(f"Role of {employee.email} set to {role.value} by {admin.id}")
        return employee
