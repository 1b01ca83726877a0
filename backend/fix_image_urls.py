"""
Upgrade insecure http:// image URLs on experiences to https://.

Images uploaded before the API forced https in production were saved with
http:// links, which browsers block as mixed content.

Usage: python fix_image_urls.py [host-suffix]   (default: herokuapp.com)
"""
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import String, cast
from app.db.session import SessionLocal
from app.models.experience import Experience
from app.services.image_service import upgrade_insecure_url

DEFAULT_HOST_SUFFIX = "herokuapp.com"


def fix_image_urls(db, host_suffix: str = DEFAULT_HOST_SUFFIX) -> int:
    """Rewrite matching image URLs and return the number of experiences changed."""
    experiences = db.query(Experience).filter(
        cast(Experience.images, String).like("%http://%")
    ).all()
    print(f"Found {len(experiences)} experiences with http:// image URLs")

    updated_count = 0
    for experience in experiences:
        images = [upgrade_insecure_url(url, host_suffix) for url in experience.images or []]
        if images == list(experience.images or []):
            continue
        # Assign a new list so the JSON column is flagged dirty
        experience.images = images
        updated_count += 1
        print(f"Updated experience: {experience.title}")

    db.commit()
    return updated_count


def main():
    host_suffix = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_HOST_SUFFIX
    db = SessionLocal()
    try:
        updated = fix_image_urls(db, host_suffix)
        print(f"Successfully updated {updated} experiences")
    except Exception as e:
        db.rollback()
        print(f"Fixing image URLs failed: {e}")
        import traceback
        traceback.print_exc()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
