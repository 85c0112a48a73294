"""File-based JSON storage.

Data layout:
  data/
    config.json        App settings (engine tunables, default archetype, transcript template)
    exports/
      <slug>.json      Exported story snapshots, stored verbatim

Slug rules: title → Unicode normalize → strip non-ASCII → lowercase →
replace non-alnum runs with hyphen → strip leading/trailing hyphens.
Export slugs that collide get -2, -3, ... appended.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates: the engine block is merged
key-by-key and validated, scalars are overwritten.
"""

# Re-export all public symbols so `from liminal import storage` works.

from .core import (  # noqa: F401
    data_dir,
    exports_dir,
    init_storage,
    slugify,
)

from .config import (  # noqa: F401
    get_config,
    get_engine_settings,
    update_config,
)

from .exports import (  # noqa: F401
    delete_export,
    get_export,
    list_exports,
    save_export,
)
