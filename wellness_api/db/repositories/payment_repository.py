from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.db.models.payment import Payment
from wellness_api.db.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[Payment]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Payment)

    async def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        result = await self.session.execute(select(Payment).where(Payment.order_id == order_id))
        return result.scalar_one_or_none()
