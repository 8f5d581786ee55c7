"""added roles: Manager and Administrator

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 00:00:01.000000

"""
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MANAGER_ID = uuid.UUID("c21a1686-ffa4-4f77-93d0-d8c00094121d")
ADMINISTRATOR_ID = uuid.UUID("69f77606-5930-4d0f-b9af-abb3acc8f141")

roles_table = sa.table(
    "roles",
    sa.column("id", sa.Uuid()),
    sa.column("name", sa.String()),
    sa.column("normalized_name", sa.String()),
    sa.column("concurrency_stamp", sa.String()),
)


def upgrade() -> None:
    op.bulk_insert(
        roles_table,
        [
            {
                "id": MANAGER_ID,
                "name": "Manager",
                "normalized_name": "MANAGER",
                "concurrency_stamp": "691a89b8-1fca-46be-b3e1-34da88bb16a0",
            },
            {
                "id": ADMINISTRATOR_ID,
                "name": "Administrator",
                "normalized_name": "ADMINISTRATOR",
                "concurrency_stamp": "ba595c2f-c3ce-4712-acc8-48918164586d",
            },
        ],
    )


def downgrade() -> None:
    op.execute(roles_table.delete().where(roles_table.c.id.in_([MANAGER_ID, ADMINISTRATOR_ID])))
