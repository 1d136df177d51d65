"""Document id generation (CUID2)."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Return a collision-resistant id for a new document.

    Ids are generated client-side (like the Firestore SDKs' auto ids) so that
    concurrent creations never collide and the caller knows the id before the
    write resolves.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result
