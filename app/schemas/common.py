from typing import Any, Optional

from pydantic import BaseModel


# 모든 엔드포인트 공통 응답: {message, data?}
class MessageResponse(BaseModel):
    message: str
    data: Optional[Any] = None
