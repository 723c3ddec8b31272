from .social_post_dto import (
    CreateSocialPostDTO,
    MediaDTO,
    SocialPostResponseDTO,
    TargetAccountDTO,
    UpdateSocialPostDTO,
)

__all__ = [
    "CreateSocialPostDTO",
    "MediaDTO",
    "SocialPostResponseDTO",
    "TargetAccountDTO",
    "UpdateSocialPostDTO",
]
