"""
Tile Mosaic Studio

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time
from pathlib import Path

import numpy as np
import streamlit as st
from PIL import Image, ImageDraw

from tile_mosaic.compositor import compose_mosaic
from tile_mosaic.config import SAMPLING_MODES, MosaicConfig
from tile_mosaic.database import TileDatabase, build_database, library_stamp
from tile_mosaic.exceptions import EmptyDatabaseError, MosaicError

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Tile Mosaic",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = MosaicConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }
    .gallery-title {
        font-family: 'Cormorant Garamond', 'Georgia', serif;
        font-size: 2.8rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle {
        font-size: 0.75rem;
        font-weight: 300;
        line-height: 1.8;
        margin-bottom: 3rem;
    }
    .label-detail {
        font-family: 'Cormorant Garamond', 'Georgia', serif;
        font-size: 0.85rem;
        font-style: italic;
        color: #a0a09a;
        text-align: center;
    }
    .stButton > button, .stDownloadButton > button {
        border-radius: 0px !important;
        letter-spacing: 0.10em;
        text-transform: uppercase;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _add_passepartout(img: Image.Image, border: int = 20) -> Image.Image:
    w, h = img.size
    bg = (250, 249, 246)
    canvas = Image.new("RGB", (w + border * 2, h + border * 2), bg)
    canvas.paste(img, (border, border))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        [border - 1, border - 1, border + w, border + h],
        outline=(224, 222, 216), width=1,
    )
    return canvas


@st.cache_resource(show_spinner="Indexing tiles ...")
def _load_database(tile_dir: str, stamp: int) -> TileDatabase:
    # stamp (newest tile mtime) invalidates the cache when tiles change
    return build_database(tile_dir)


# -- Title -------------------------------------------------------------
st.markdown(
    '<div class="gallery-title">Tile Mosaic</div>',
    unsafe_allow_html=True,
)
st.markdown(
    '<div class="gallery-subtitle">'
    "Upload any image and it is rebuilt from the small photos in your tile "
    "library. Each cell of the picture is replaced by the tile whose average "
    "colour is nearest to it; when several tiles share that colour one of "
    "them is picked at random, so every run looks a little different."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2 = st.columns(2)
with ctrl1:
    tile_dir = Path(st.text_input("Tile library", str(_DEFAULTS.tile_dir)))
    sampling = st.radio(
        "Cell colour", SAMPLING_MODES, horizontal=True,
        index=SAMPLING_MODES.index(_DEFAULTS.sampling),
    )
with ctrl2:
    grid_width = st.number_input("Cell width (px)", 1, 256, _DEFAULTS.grid_width)
    grid_height = st.number_input("Cell height (px)", 1, 256, _DEFAULTS.grid_height)

cfg = MosaicConfig(
    grid_width=int(grid_width),
    grid_height=int(grid_height),
    sampling=sampling,
    tile_dir=tile_dir,
)

st.markdown("---")

if not tile_dir.is_dir():
    st.warning(f"{tile_dir} does not exist. Run `tile-mosaic scan <folder>` first.")
    st.stop()

try:
    database = _load_database(str(tile_dir), library_stamp(tile_dir))
except EmptyDatabaseError as exc:
    st.warning(f"{exc}. Run `tile-mosaic scan <folder>` first.")
    st.stop()

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Select artwork", type=["jpg", "jpeg", "png", "webp", "bmp", "jfif"],
)

if uploaded is not None:
    original = Image.open(io.BytesIO(uploaded.getvalue())).convert("RGB")

    if original.width < cfg.grid_width or original.height < cfg.grid_height:
        st.error("The image is smaller than a single cell.")
        st.stop()

    if st.button("COMPOSE", type="primary", use_container_width=True):
        t0 = time.perf_counter()
        with st.spinner("Composing ..."):
            try:
                mosaic = compose_mosaic(
                    np.asarray(original), database, cfg, rng=np.random.default_rng(),
                )
            except MosaicError as exc:
                st.error(str(exc))
                st.stop()
        elapsed = time.perf_counter() - t0

        mosaic_img = Image.fromarray(mosaic)
        st.image(_add_passepartout(mosaic_img.convert("RGB"), border=28),
                 use_container_width=True)

        buf = io.BytesIO()
        mosaic_img.save(buf, format="PNG")
        _, dl_col, _ = st.columns([1, 2, 1])
        with dl_col:
            st.download_button(
                "SAVE ART",
                data=buf.getvalue(),
                file_name="result.png",
                mime="image/png",
                use_container_width=True,
            )

        h, w = mosaic.shape[:2]
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Resolution", f"{w} × {h}")
        m2.metric("Cells", f"{(w // cfg.grid_width) * (h // cfg.grid_height):,}")
        m3.metric("Tiles", f"{database.num_tiles:,}")
        m4.metric("Time", f"{elapsed:.1f} s")
    else:
        st.image(original, use_container_width=True)
        st.markdown(
            '<div class="label-detail">Source</div>',
            unsafe_allow_html=True,
        )
else:
    st.markdown(
        f'<div class="label-detail">{database.num_tiles:,} tiles in '
        f"{len(database):,} colours. Select an artwork to begin.</div>",
        unsafe_allow_html=True,
    )
