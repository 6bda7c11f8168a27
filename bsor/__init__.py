"""Read BS Open Replay (.bsor) files, in full or block by block."""

from .blocks import (  # noqa: F401
    DATA_BLOCKS,
    RECORD_SPECS,
    BlockType,
    RecordSpec,
    read_block,
    read_records,
    skip_records,
)
from .container import Replay, decode_full  # noqa: F401
from .errors import (  # noqa: F401
    CorruptBlock,
    InvalidEncoding,
    ReplayError,
    SeekUnsupported,
    Truncated,
    UnknownBlock,
    UnsupportedFormat,
)
from .header import MAGIC, SUPPORTED_VERSIONS, Header, read_header  # noqa: F401
from .index import BlockIndexEntry, ReplayIndex, build_index, materialize  # noqa: F401
from .info import INFO_TAG, Info, read_info  # noqa: F401
from .notes import (  # noqa: F401
    ColorType,
    CutDirection,
    Note,
    NoteCutInfo,
    NoteEventType,
    NoteScoringType,
    read_note,
)
from .records import (  # noqa: F401
    Frame,
    Height,
    Pause,
    Pose,
    Vector3,
    Vector4,
    Wall,
    read_frame,
    read_height,
    read_pause,
    read_wall,
)
