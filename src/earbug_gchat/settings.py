from decouple import AutoConfig


config = AutoConfig(search_path=".")


DEBUG = config("DEBUG", default=False, cast=bool)

# Storage: a GCS bucket in deployment, a plain directory for local runs
EARBUG_BUCKET = config("EARBUG_BUCKET", default="")
EARBUG_DATA_DIR = config("EARBUG_DATA_DIR", default="")

# Google Chat space webhook to post summaries to
EARBUG_GCHAT = config("EARBUG_GCHAT", default="")

# Cloud Run kills the request after 5s anyway
REQUEST_TIMEOUT = config("REQUEST_TIMEOUT", default=5.0, cast=float)

HOST = config("HOST", default="0.0.0.0")
PORT = config("PORT", default=8080, cast=int)
