from .users import AuthIn, AuthOut, ActionOkOut
from .posts import PostIn, PostOut, PostCreatedOut

__all__ = ['AuthIn', 'AuthOut', 'ActionOkOut', 'PostIn', 'PostOut', 'PostCreatedOut']
