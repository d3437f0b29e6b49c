# services/venue_images.py

"""
Venue media. The deployed schema keeps one cover image and one cover
video on the venues row, so listing synthesizes at most two entries.
Ordering / metadata edits still target the venue_images table.
"""

from typing import List, Optional

from supabase import Client

from core.config import Settings
from core.errors import AppError, NotFound, handle_supabase_error, parse_form
from core.permission_helpers import require_venue_owner
from core.results import ActionResult, guarded_action, ok
from core.storage import MAX_IMAGE_BYTES, MAX_VIDEO_BYTES, generate_file_path, upload_file
from core.utils import utc_now_iso
from models.enums import ImageType
from models.principal import Principal
from models.venue_image import ImageOrderPayload, UploadedMedia, VenueImage, VenueImageUpdate
from services.venues import revalidate_venue_views


COVER_IMAGE_SUFFIX = "cover-image"
COVER_VIDEO_SUFFIX = "cover-video"


def _media_row(client: Client, venue_id: str) -> dict:
    try:
        res = (
            client.table("venues")
            .select("cover_image_url, cover_video_url")
            .eq("id", venue_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venue images")

    if not res.data:
        raise NotFound("Venue not found", code="VENUE_NOT_FOUND")
    return res.data[0]


@guarded_action("getVenueImages")
def get_venue_images(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    row = _media_row(client, venue_id)
    now = utc_now_iso()
    images: List[VenueImage] = []

    if row.get("cover_image_url"):
        images.append(VenueImage(
            id=f"{venue_id}-{COVER_IMAGE_SUFFIX}",
            venue_id=venue_id,
            image_url=row["cover_image_url"],
            image_type=ImageType.cover,
            caption="Cover Image",
            display_order=0,
            created_at=now,
        ))

    if row.get("cover_video_url"):
        images.append(VenueImage(
            id=f"{venue_id}-{COVER_VIDEO_SUFFIX}",
            venue_id=venue_id,
            image_url=row["cover_video_url"],
            image_type=ImageType.cover,
            caption="Cover Video",
            display_order=1,
            created_at=now,
        ))

    return ok([img.model_dump(mode="json") for img in images])


@guarded_action("uploadVenueImage")
def upload_venue_image(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    filename: Optional[str],
    content_type: Optional[str],
    content: Optional[bytes],
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    image/* up to 5 MB or video/* up to 10 MB. The bytes go to Supabase
    Storage; only the returned public URL is stored on the venue.
    """
    require_venue_owner(client, principal, venue_id)

    if not content or not filename:
        raise AppError("No file provided", code="NO_FILE_PROVIDED")

    content_type = content_type or ""
    is_image = content_type.startswith("image/")
    is_video = content_type.startswith("video/")

    if not is_image and not is_video:
        raise AppError("File must be an image or video", code="INVALID_FILE_TYPE")

    max_size = MAX_VIDEO_BYTES if is_video else MAX_IMAGE_BYTES
    if len(content) > max_size:
        raise AppError(
            f"File size must be less than {'10MB' if is_video else '5MB'}",
            code="FILE_TOO_LARGE",
        )

    path = generate_file_path(principal.id, venue_id, filename)
    url = upload_file(client, path, content, content_type, settings)

    column = "cover_video_url" if is_video else "cover_image_url"
    try:
        client.table("venues").update({column: url, "updated_at": utc_now_iso()}).eq("id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to upload media")

    revalidate_venue_views(venue_id)
    return ok(UploadedMedia(url=url, type="video" if is_video else "image").model_dump())


@guarded_action("deleteVenueImage")
def delete_venue_image(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    image_id: str,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    if image_id == f"{venue_id}-{COVER_IMAGE_SUFFIX}":
        column = "cover_image_url"
    elif image_id == f"{venue_id}-{COVER_VIDEO_SUFFIX}":
        column = "cover_video_url"
    else:
        raise NotFound("Media not found", code="MEDIA_NOT_FOUND")

    try:
        client.table("venues").update({column: None}).eq("id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete media")

    revalidate_venue_views(venue_id)
    return ok()


@guarded_action("updateVenueImageOrder")
def update_venue_image_order(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    updates,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    if isinstance(updates, list):
        updates = {"updates": updates}
    payload = parse_form(ImageOrderPayload, updates)

    # One row at a time; an error stops the loop, earlier rows stay updated
    for item in payload.updates:
        try:
            (
                client.table("venue_images")
                .update({"display_order": item.display_order})
                .eq("id", item.id)
                .eq("venue_id", venue_id)
                .execute()
            )
        except Exception as e:
            raise handle_supabase_error(e, "Failed to update image order")

    revalidate_venue_views(venue_id)
    return ok()


@guarded_action("updateVenueImage")
def update_venue_image(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    image_id: str,
    data,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    form = parse_form(VenueImageUpdate, data)

    try:
        image = (
            client.table("venue_images")
            .select("id")
            .eq("id", image_id)
            .eq("venue_id", venue_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch image")

    if not image.data:
        raise NotFound("Image not found", code="IMAGE_NOT_FOUND")

    try:
        client.table("venue_images").update({
            "image_type": form.image_type.value,
            "caption": form.caption or None,
        }).eq("id", image_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update image")

    revalidate_venue_views(venue_id)
    return ok()
