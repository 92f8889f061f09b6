SERVICE_NAME = "probe"
