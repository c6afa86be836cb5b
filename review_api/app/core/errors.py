from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import log_error


class AppError(Exception):
	"""Base for every error the API reports by name.

	Subclasses set ``name`` and ``status_code``; the message can be
	overridden per raise.
	"""

	name = "AppError"
	status_code = status.HTTP_400_BAD_REQUEST
	message = "Request failed"

	def __init__(self, message: str | None = None, details=None):
		if message is not None:
			self.message = message
		self.details = details
		super().__init__(self.message)


class MissingCredentialsError(AppError):
	name = "MissingCredentialsError"
	message = "Please provide both username and password."


class PasswordTooShortError(AppError):
	name = "PasswordTooShortError"
	message = "Password is too short."


class UserExistsError(AppError):
	name = "UserExistsError"
	status_code = status.HTTP_409_CONFLICT
	message = "Username is already taken."


class InvalidCredentialsError(AppError):
	name = "InvalidCredentialsError"
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Invalid username or password."


class AuthorizationHeaderError(AppError):
	name = "AuthorizationHeaderError"
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Authorization token must start with Bearer "


class InvalidTokenError(AppError):
	name = "InvalidTokenError"
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Invalid or expired token"


class NotAuthenticatedError(AppError):
	name = "NotAuthenticatedError"
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "You must be logged in to perform this action"


class ResourceNotFoundError(AppError):
	status_code = status.HTTP_404_NOT_FOUND

	def __init__(self, kind: str, resource_id=None):
		self.kind = kind
		self.resource_id = resource_id
		self.name = f"{kind}NotFoundError"
		if resource_id is None:
			message = f"{kind} not found"
		else:
			message = f"{kind} with ID {resource_id} not found"
		super().__init__(message)


class UnauthorizedError(AppError):
	name = "UnauthorizedError"
	status_code = status.HTTP_403_FORBIDDEN
	message = "You do not have permission to modify this resource"


class MissingFieldsError(AppError):
	name = "MissingFieldsError"
	message = "Required fields are missing."


class NoFieldsProvidedError(AppError):
	name = "NoFieldsProvidedError"
	message = "Please provide rating or reviewText to update."


class InvalidRatingError(AppError):
	name = "InvalidRatingError"
	message = "Rating must be an integer between 1 and 5."


class DuplicateReviewError(AppError):
	name = "DuplicateReviewError"
	status_code = status.HTTP_409_CONFLICT
	message = "You have already submitted a review for this item."


class InfrastructureError(AppError):
	name = "InfrastructureError"
	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	message = "Internal Server Error"


def error_response(request: Request, status_code: int, message: str, details=None, name: str | None = None):
	# Ensure details is serializable
	if isinstance(details, Exception):
		details = str(details)
	return JSONResponse(
		status_code=status_code,
		content={
			"error": {
				"name": name,
				"message": message,
				"details": details,
				"request_id": getattr(request.state, "request_id", None),
			}
		},
	)

async def app_error_handler(request: Request, exc: AppError):
	return error_response(request, exc.status_code, exc.message, details=exc.details, name=exc.name)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
	return error_response(
		request,
		status.HTTP_422_UNPROCESSABLE_ENTITY,
		"Validation error",
		details=jsonable_encoder(exc.errors()),
		name="ValidationError",
	)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
	return error_response(request, exc.status_code, str(exc.detail), name="HTTPError")

async def database_error_handler(request: Request, exc: SQLAlchemyError):
	log_error(
		"unhandled_db_error",
		error=exc.__class__.__name__,
		path=request.url.path,
		request_id=getattr(request.state, "request_id", None),
	)
	error = InfrastructureError()
	return error_response(request, error.status_code, error.message, name=error.name)

async def unhandled_exception_handler(request: Request, exc: Exception):
	log_error(
		"unhandled_error",
		error=exc.__class__.__name__,
		path=request.url.path,
		request_id=getattr(request.state, "request_id", None),
	)
	error = InfrastructureError()
	return error_response(request, error.status_code, error.message, name=error.name)
