"""Cursor pagination metadata shared by list endpoints.

Cursor pages are keyed by opaque ids: ``newest_id`` is the first item of the
page and ``oldest_id`` the last one.  Clients pass ``until_id=oldest_id`` to
fetch the next page and ``since_id=newest_id`` to go back.
"""
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field


class Meta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    newest_id: str | None = Field(default=None, description="Id of the first item on the page.")
    oldest_id: str | None = Field(default=None, description="Id of the last item on the page.")
    result_count: int = Field(description="Number of items on this page.")
    result_total: int | None = Field(
        default=None, description="Size of the result set the page was cut from; null when unknown."
    )

    @classmethod
    def from_ids(cls, ids: Sequence[str], total: int | None = None) -> "Meta":
        return cls(
            newest_id=ids[0] if ids else None,
            oldest_id=ids[-1] if ids else None,
            result_count=len(ids),
            result_total=total,
        )
