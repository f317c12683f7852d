from __future__ import annotations

from collections.abc import Iterable

from tiktok_open_api.models.users import UserField, UserInfo, UserInfoData
from tiktok_open_api.services.base import BaseService, join_fields

USER_INFO_PATH = "/v2/user/info/"


class UserService(BaseService):
    async def get_user_info(
        self, access_token: str, fields: Iterable[UserField | str]
    ) -> UserInfo:
        """Fetch the authorized user's profile with the requested fields."""
        data = await self._get_envelope(
            USER_INFO_PATH,
            access_token,
            UserInfoData,
            params={"fields": join_fields(fields)},
        )
        return data.user
