from config.env import env

# When false, "created"/"updated" are accepted without checking the dateTime form.
DIDS_VALIDATE_TIMESTAMPS = env.bool("DIDS_VALIDATE_TIMESTAMPS", default=True)
