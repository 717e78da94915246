import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "college_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

EDIT_WINDOW_MINUTES = int(os.getenv("EDIT_WINDOW_MINUTES", "120"))
EMAIL_DOMAIN = os.getenv("EMAIL_DOMAIN", "aliet.ac.in")
BRANCHES = ["CIVIL", "EEE", "MECH", "ECE", "CSE", "IT", "CSM", "CSD"]

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
