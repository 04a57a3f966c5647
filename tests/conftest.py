import os

from hypothesis import HealthCheck, settings


# CI can be slow, so be patient. Also we can run more tests there
settings.register_profile(
    "ci",
    deadline=settings.default.deadline * 10,
    max_examples=settings.default.max_examples * 5,
    suppress_health_check=[HealthCheck.too_slow])

# quick runs while working on the decoders
settings.register_profile("dev", max_examples=10)

if "HYPOTHESIS_PROFILE" in os.environ:
    settings.load_profile(os.environ["HYPOTHESIS_PROFILE"])
elif "CI" in os.environ:
    settings.load_profile("ci")
