from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    # Clients send camelCase; every field is optional so that a missing value
    # is reported by the service with the endpoint's own message.
    model_config = ConfigDict(populate_by_name=True)


class AccountPayload(_Payload):
    email: str | None = None
    password: str | None = None
    user_type: str | None = Field(default=None, alias='userType')


class ConnectRequestPayload(_Payload):
    student_email: str | None = Field(default=None, alias='studentEmail')
    teacher_id: int | None = Field(default=None, alias='teacherId')


class AcceptConnectRequestPayload(_Payload):
    request_id: int | None = Field(default=None, alias='requestId')


class BookActionPayload(_Payload):
    book_id: int | None = Field(default=None, alias='bookId')
    user_email: str | None = Field(default=None, alias='userEmail')
