SERVICE_NAME = "readiness"
