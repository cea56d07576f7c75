"""Editorial checks on parsed posts.

These never fail a parse; they flag things a reader would notice, such as
images without alt text or code samples without a language for highlighting.
"""

from blogdoc.models.post import Post


def post_warnings(post: Post) -> list[str]:
    """Return human-readable warnings for *post*, in document order."""
    warnings: list[str] = []
    if not post.description:
        warnings.append("no description")
    if post.cover_image is not None and not post.cover_image.alt:
        warnings.append(f"cover image {post.cover_image.path} has no alt text")

    for position, block in enumerate(post.body, start=1):
        if block.kind == "image" and not block.alt:
            warnings.append(f"block {position}: image {block.path} has no alt text")
        elif block.kind == "code" and not block.language:
            warnings.append(f"block {position}: code sample has no language tag")
        elif block.kind == "heading" and block.level == 1:
            # The post title already renders as the page's h1
            warnings.append(f"block {position}: level-1 heading {block.text!r}")
    return warnings
