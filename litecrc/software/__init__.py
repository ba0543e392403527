from litecrc.software.crc32 import Beat, crc32_byte_step, crc32_block_update, crc32_finalize, crc32
from litecrc.software.crc32 import split_beats, beat_bytes
