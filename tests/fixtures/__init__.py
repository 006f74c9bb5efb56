"""
Shared test fixtures: API response envelopes.
"""
from .payloads import (
    make_album,
    make_album_image,
    make_album_images_expansion,
    make_album_response,
    make_album_with_images_response,
    make_album_with_node_and_user_response,
    make_auth_user_response,
    make_described_album,
    make_envelope,
    make_image,
    make_image_expansions,
    make_image_response,
    make_node,
    make_node_response,
    make_user,
    make_user_albums_empty_response,
    make_user_albums_response,
)
