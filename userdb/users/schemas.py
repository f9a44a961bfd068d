from pydantic import BaseModel

# Pydantic model for the user fields accepted on create and replace
# Unknown fields in the request body are ignored
class UserCreate(BaseModel):
    username: str
    email: str
    phone: str
    dateOfBirth: str

# Pydantic model for a stored user as returned to clients
class UserResponse(BaseModel):
    id: str  # Hex string of the MongoDB ObjectId
    username: str
    email: str
    phone: str
    dateOfBirth: str
