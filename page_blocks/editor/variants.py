"""Éditeurs par variante — uniquement les champs de chaque type de bloc."""
from .forms import BlockForm, FieldSpec


class TextBlockForm(BlockForm):
    block_type = "text"
    fields = [
        FieldSpec(name="content", label="Content", kind="textarea", placeholder="Write your content here..."),
        FieldSpec(name="alignment", label="Alignment", kind="choice", choices=("left", "center", "right")),
        FieldSpec(name="font_size", label="Font Size", kind="choice", choices=("small", "medium", "large")),
    ]


class GalleryBlockForm(BlockForm):
    block_type = "gallery"
    fields = [
        FieldSpec(name="title", label="Title", required=True, placeholder="e.g., Training Highlights"),
        FieldSpec(name="description", label="Description (Optional)", kind="textarea", optional=True),
        FieldSpec(name="grid_view", label="Columns", kind="choice", choices=(1, 2, 3, 4)),
        FieldSpec(name="images", label="Images", kind="list", asset_slots=True, placeholder="/uploads/image.jpg"),
    ]


class EventsBlockForm(BlockForm):
    block_type = "events"
    fields = [
        FieldSpec(name="title", label="Section Title (Optional)", optional=True, placeholder="e.g., Upcoming Events"),
        FieldSpec(name="layout", label="Layout", kind="choice", choices=("list", "grid")),
        FieldSpec(
            name="events", label="Events", kind="items",
            item_fields=[
                FieldSpec(name="title", label="Event Title", placeholder="e.g., Annual Showcase"),
                FieldSpec(name="date", label="Date", placeholder="e.g., 12 March 2025"),
                FieldSpec(name="time", label="Time", placeholder="e.g., 7:00 PM"),
                FieldSpec(name="location", label="Location", placeholder="e.g., Main Auditorium"),
                FieldSpec(name="description", label="Description", kind="textarea"),
            ],
            item_default={"title": "", "date": "", "time": "", "location": "", "description": ""},
        ),
    ]


class LeadershipBlockForm(BlockForm):
    block_type = "leadership"
    fields = [
        FieldSpec(name="title", label="Section Title (Optional)", optional=True, placeholder="e.g., Leadership Team"),
        FieldSpec(name="layout", label="Layout", kind="choice", choices=("grid", "list")),
        FieldSpec(
            name="members", label="Members", kind="items",
            item_fields=[
                FieldSpec(name="name", label="Name"),
                FieldSpec(name="role", label="Role", placeholder="e.g., President"),
                FieldSpec(name="year", label="Year", placeholder="e.g., Year 2"),
                FieldSpec(name="course", label="Course", placeholder="e.g., Computer Science"),
                FieldSpec(name="image_url", label="Photo", kind="asset", optional=True),
            ],
            item_default={"name": "", "role": "", "year": "", "course": "", "image_url": None},
        ),
    ]


class AchievementsBlockForm(BlockForm):
    block_type = "achievements"
    fields = [
        FieldSpec(name="title", label="Section Title (Optional)", optional=True, placeholder="e.g., Our Achievements"),
        FieldSpec(name="style", label="Display Style", kind="choice", choices=("list", "badges")),
        FieldSpec(name="achievements", label="Achievements", kind="list", placeholder="e.g., Champions 2024"),
    ]


class StatsBlockForm(BlockForm):
    block_type = "stats"
    fields = [
        FieldSpec(name="layout", label="Layout", kind="choice", choices=("horizontal", "grid")),
        FieldSpec(
            name="stats", label="Statistics", kind="items",
            item_fields=[
                FieldSpec(name="label", label="Label", placeholder="e.g., Members"),
                FieldSpec(name="value", label="Value", placeholder="e.g., 120+"),
                FieldSpec(name="icon", label="Icon (Optional)", optional=True, placeholder="e.g., 🏆"),
            ],
            item_default={"label": "", "value": "", "icon": None},
        ),
    ]


class CTABlockForm(BlockForm):
    block_type = "cta"
    fields = [
        FieldSpec(name="title", label="Title", required=True, placeholder="e.g., Join Our CCA Today!"),
        FieldSpec(name="description", label="Description (Optional)", kind="textarea", optional=True),
        FieldSpec(name="link", label="Link", required=True, placeholder="e.g., /join"),
    ]
