from fastapi import Header, HTTPException, status

MEMBER_HEADER = "X-Member-Name"
MAX_MEMBER_NAME_LENGTH = 40


async def get_current_member(
    x_member_name: str | None = Header(default=None, alias=MEMBER_HEADER),
) -> str:
    """Resolve the self-reported display name sent by the client.

    There is no verification: the name is whatever the traveler typed on the
    name gate. It only has to be present and reasonably short.
    """
    name = (x_member_name or "").strip()
    if not name:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Member name required")
    if len(name) > MAX_MEMBER_NAME_LENGTH:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Member name too long")
    return name
