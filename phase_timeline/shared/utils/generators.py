from cuid2 import cuid_wrapper

# Create a CUID generator with custom settings
cuid_generator = cuid_wrapper()


def generate_run_id() -> str:
    """Generate a collision-resistant identifier for a workflow run"""
    result = cuid_generator()
    assert isinstance(result, str)
    return result
