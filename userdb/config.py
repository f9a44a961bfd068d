import os
from dotenv import load_dotenv

# Load environment variables from a .env file
load_dotenv()

class Config:
    # MongoDB configuration
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")     # MongoDB URI
    MONGO_DB = os.getenv("MONGO_DB", "userdb")                          # MongoDB database name
    MONGO_COLLECTION = os.getenv("MONGO_COLLECTION", "users")           # Collection holding users

    # HTTP listener configuration
    HOST = os.getenv("HOST", "0.0.0.0")                                 # Listen address
    PORT = int(os.getenv("PORT", "1234"))                               # Listen port

    # Logging configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()                  # Root log level

# Create an instance of the Config class
config = Config()
