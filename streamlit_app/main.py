# streamlit_app/main.py

import asyncio
import logging
import sys
from pathlib import Path

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from streamlit_folium import st_folium

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.chat.handoff import ANALYTICS_PAGE, HandoffStore
from floatchat.chat.messages import Message, MessageKind, Sender
from floatchat.chat.transcript import ChatTranscript
from floatchat.config import config
from floatchat.data.exporter import DataExporter
from floatchat.data.float_registry import FloatRegistry
from floatchat.data.mock_data import PROFILES
from floatchat.nlp.query_interpreter import QueryInterpreter
from floatchat.utils.helpers import ActivityLog
from floatchat.visualization.map_events import MapEventHandler
from floatchat.visualization.panel import VisualizationPanel
from floatchat.visualization.plot_generator import FloatChatPlotGenerator, generate_surface_series

logger = logging.getLogger(__name__)

PAGES = ["Home", "Float Explorer", "AI Chat", ANALYTICS_PAGE, "ARGO Floats", "ERDDAP API"]

ERDDAP_EXAMPLE_QUERY = (
    "https://data.ioos.us/erddap/tabledap/argo_prof.json?time,latitude,longitude,temp,salinity"
    "&time>=2023-01-01T00:00:00Z&time<=2023-03-31T23:59:59Z"
    "&latitude>=10&latitude<=20&longitude>=60&longitude<=80"
)

EXAMPLE_QUERIES = [
    "Show salinity near equator in March 2023",
    "Compare oxygen levels at 100m vs 500m depth",
    "Plot temperature changes in Arabian Sea",
]

# Configure page
st.set_page_config(
    page_title=config.get('app.title', 'FloatChat'),
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        color: #1f77b4;
        font-weight: bold;
        margin-bottom: 0.25rem;
    }
    .sub-header {
        color: #2e86ab;
        margin-bottom: 1rem;
    }
    .insight-card {
        background-color: #f0f2f6;
        padding: 0.75rem 1rem;
        border-radius: 10px;
        border-left: 4px solid #1f77b4;
    }
    .stButton button {
        width: 100%;
        border-radius: 8px;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


class FloatChatDashboard:
    def __init__(self):
        self.plot_generator = FloatChatPlotGenerator(
            template=config.get('visualization.template', 'plotly_white'),
            chart_height=config.get('visualization.chart_height', 300),
            tiles=config.get('map.tiles', 'OpenStreetMap'),
            zoom_start=config.get('map.zoom_start', 4)
        )
        self.panel = VisualizationPanel(self.plot_generator)
        self.initialize_state()

    def initialize_state(self):
        """Session-scoped components; nothing survives a page reload"""
        if 'activity' not in st.session_state:
            st.session_state.activity = ActivityLog()
        if 'exporter' not in st.session_state:
            st.session_state.exporter = DataExporter(prefix=config.get('export.prefix', 'argo-export'))
        if 'registry' not in st.session_state:
            st.session_state.registry = FloatRegistry(
                on_select=self._on_float_selected,
                on_region=self._on_region_selected
            )
        if 'transcript' not in st.session_state:
            st.session_state.transcript = ChatTranscript(
                interpreter=QueryInterpreter(exporter=st.session_state.exporter),
                reply_delay=config.get_reply_delay(),
                cancel_superseded=bool(config.get('chat.cancel_superseded', False)),
                on_query=self._on_query
            )
        if 'handoff_store' not in st.session_state:
            st.session_state.handoff_store = HandoffStore()
        if 'map_events' not in st.session_state:
            st.session_state.map_events = MapEventHandler(st.session_state.registry)
        if 'map_version' not in st.session_state:
            st.session_state.map_version = 0

    @property
    def registry(self) -> FloatRegistry:
        return st.session_state.registry

    @property
    def transcript(self) -> ChatTranscript:
        return st.session_state.transcript

    @property
    def handoff_store(self) -> HandoffStore:
        return st.session_state.handoff_store

    @property
    def activity(self) -> ActivityLog:
        return st.session_state.activity

    def _on_float_selected(self, float_id):
        st.session_state.activity.record(f"Selected float {float_id}" if float_id else "Cleared float selection")

    def _on_region_selected(self, bounds):
        sw, ne = bounds.south_west, bounds.north_east
        st.session_state.activity.record(
            f"Region selected: {sw[0]:.1f},{sw[1]:.1f} → {ne[0]:.1f},{ne[1]:.1f}"
        )

    def _on_query(self, query, parameters, profiles):
        st.session_state.activity.record(f"Query: '{query}' ({', '.join(parameters) or 'greeting'})")

    def _safe_figure(self, build, *args, **kwargs) -> go.Figure:
        try:
            return build(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error creating plot: {e}")
            return self.plot_generator._create_empty_plot("Plot could not be generated")

    def render_header(self):
        st.markdown(
            f'<div class="main-header">🌊 {config.get("app.title", "FloatChat")}</div>',
            unsafe_allow_html=True
        )
        st.markdown(
            f'<div class="sub-header">{config.get("app.region_label")} · {config.get("app.version")}</div>',
            unsafe_allow_html=True
        )

    def render_sidebar(self) -> str:
        """Render the sidebar navigation and return the chosen page"""
        with st.sidebar:
            st.markdown("### Navigation")
            page = st.radio("Page", PAGES, key='current_page', label_visibility='collapsed')

            st.markdown("---")
            selected = self.registry.selected_record
            if selected is not None:
                st.success(f"Selected float: {selected.id}")
            else:
                st.info("No float selected")

            if self.handoff_store.current is not None:
                st.caption(f"Analytics query: {self.handoff_store.current.query}")

        return page

    def render_home_page(self):
        st.markdown("### Conversational access to ARGO ocean profiles")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Floats", len(self.registry))
        with col2:
            st.metric("Parameters", len(PROFILES))
        with col3:
            st.metric("Chat Messages", len(self.transcript.messages))
        with col4:
            surface = PROFILES['temperature'].chart_points[0].value
            st.metric("Surface Temp", f"{surface}°C")

        st.markdown("---")
        st.markdown("### Try asking")
        cols = st.columns(len(EXAMPLE_QUERIES))
        for col, query in zip(cols, EXAMPLE_QUERIES):
            with col:
                st.code(query, language=None)

    def render_float_explorer(self):
        st.markdown("### 🗺️ Float Explorer")
        st.caption("Click a float to select it, or draw a rectangle to choose a region.")

        m = self.plot_generator.create_float_map(
            self.registry.floats,
            selected_id=self.registry.selected_float,
            bounds=self.registry.map_bounds(config.get('map.padding_degrees', 5))
        )
        map_data = st_folium(
            m,
            height=500,
            use_container_width=True,
            key=f"float_map_{st.session_state.map_version}",
            returned_objects=['last_object_clicked', 'last_active_drawing']
        )
        self.handle_map_events(map_data)

        if self.registry.last_region is not None:
            sw, ne = self.registry.last_region.south_west, self.registry.last_region.north_east
            st.info(f"Region: SW ({sw[0]:.2f}, {sw[1]:.2f}) · NE ({ne[0]:.2f}, {ne[1]:.2f})")

        st.dataframe(self.registry.to_dataframe(), use_container_width=True, hide_index=True)

    def handle_map_events(self, map_data):
        if st.session_state.map_events.handle(map_data):
            # Remount the map so a repeat click on the same float is a new event
            st.session_state.map_version += 1
            st.rerun()

    def render_ai_chat(self):
        st.markdown("### 🤖 AI Ocean Data Assistant")

        for message in self.transcript.messages:
            self.render_message(message)

        if prompt := st.chat_input("Ask about temperature, salinity or oxygen..."):
            self.transcript.selected_float = self.registry.selected_record
            with st.chat_message("user"):
                st.markdown(prompt)
            with st.spinner("Analyzing data..."):
                asyncio.run(self.transcript.submit_and_wait(prompt))
            st.rerun()

    def render_message(self, message: Message):
        role = "user" if message.sender is Sender.USER else "assistant"
        with st.chat_message(role):
            if message.kind is MessageKind.TEXT:
                st.markdown(message.content)
            elif message.kind is MessageKind.TABLE:
                payload = message.payload
                df = pd.DataFrame([(row.depth, row.value) for row in payload.rows], columns=list(payload.columns))
                st.dataframe(df, use_container_width=True, hide_index=True)
            elif message.kind is MessageKind.CHART:
                payload = message.payload
                fig = self._safe_figure(
                    self.plot_generator.create_profile_chart,
                    payload.points, f"{payload.label} ({payload.unit})", payload.color,
                    title=message.content
                )
                st.plotly_chart(fig, use_container_width=True, key=f"chart-{message.id}")
                if st.button("📊 View in Analytics", key=f"analytics-{message.id}"):
                    self.open_in_analytics(message)
            elif message.kind is MessageKind.METADATA:
                st.markdown(f"**{message.content}**")
                for key, value in message.payload.fields.items():
                    st.markdown(f"- **{key}:** {value}")
            elif message.kind is MessageKind.DOWNLOAD:
                payload = message.payload
                st.download_button(
                    label=f"📥 {payload.filename}",
                    data=payload.data,
                    file_name=payload.filename,
                    mime=payload.mime,
                    key=f"download-{message.id}"
                )

    def open_in_analytics(self, message: Message):
        self.handoff_store.publish(self.transcript.forward(message))
        st.session_state.pending_page = ANALYTICS_PAGE
        st.rerun()

    def render_analytics(self):
        st.markdown("### 📊 Analytics")
        handoff = self.handoff_store.current
        if handoff is None:
            content = self.panel.build({}, '', self.registry.selected_float)
        else:
            content = self.panel.build(handoff.profiles, handoff.query, handoff.selected_float)
            st.caption(f"Query: {handoff.query} · view: {content.active_tab}")

        if content.selected_float:
            st.info(f"Float: {content.selected_float}")

        if content.is_empty:
            st.info(content.empty_message)
            return

        for section in content.sections:
            st.markdown(f"#### {section.label}")
            col1, col2, col3 = st.columns(3)
            col1.metric("Min", f"{section.summary.minimum:g}")
            col2.metric("Max", f"{section.summary.maximum:g}")
            col3.metric("Average", f"{section.summary.average:.2f}")

            left, right = st.columns([1, 2])
            with left:
                st.dataframe(section.table, use_container_width=True, hide_index=True)
            with right:
                st.plotly_chart(section.figure, use_container_width=True, key=f"panel-{section.parameter}")

            if section.insight:
                st.markdown(f'<div class="insight-card">{section.insight}</div>', unsafe_allow_html=True)

    def render_argo_floats(self):
        st.markdown("### 🛰️ ARGO Floats")

        search = st.text_input("Search floats", placeholder="ARGO-39012 or basin name")
        matches = self.registry.search(search)
        st.dataframe(self.registry.to_dataframe(matches), use_container_width=True, hide_index=True)

        col1, col2, col3, col4 = st.columns(4)
        exporter: DataExporter = st.session_state.exporter
        with col1:
            artifact = exporter.export_json(self.registry.floats, PROFILES)
            if st.download_button("📥 Export JSON", data=artifact.data, file_name=artifact.filename,
                                  mime=artifact.mime):
                self.activity.record(f"Exported {artifact.filename}")
        with col2:
            artifact = exporter.export_zip(self.registry.floats, PROFILES)
            if artifact.fallback:
                st.warning("ZIP export unavailable, offering JSON instead")
            if st.download_button("🗜️ Export ZIP", data=artifact.data, file_name=artifact.filename,
                                  mime=artifact.mime):
                self.activity.record(f"Exported {artifact.filename}")
        with col3:
            if st.button("➕ Add Random Float"):
                record = self.registry.add_random_float()
                self.activity.record(f"Added {record.id}")
                st.rerun()
        with col4:
            if st.button("🔄 Reset"):
                self.registry.reset()
                self.activity.record("Reset float list")
                st.rerun()

        st.markdown("---")
        left, right = st.columns(2)
        with left:
            st.plotly_chart(self._safe_figure(self.plot_generator.create_comparison_bar, PROFILES),
                            use_container_width=True)
        with right:
            st.plotly_chart(self._safe_figure(self.plot_generator.create_surface_timeseries,
                                              generate_surface_series()),
                            use_container_width=True)

        st.markdown("### Recent Activity")
        if len(self.activity):
            for entry in self.activity.entries[:10]:
                st.markdown(f"- {entry}")
        else:
            st.info("No activity yet")

    def render_erddap(self):
        st.markdown("### 🌐 ERDDAP API")
        st.markdown(
            "ERDDAP is a data server that gives a simple, consistent way to download subsets of "
            "scientific datasets. ARGO profiles are published as a tabledap dataset: choose the "
            "variables, then constrain time, latitude and longitude in the query string."
        )
        st.markdown("Example query for Arabian Sea profiles in the first quarter of 2023:")
        st.code(ERDDAP_EXAMPLE_QUERY, language=None)
        st.caption("This prototype does not call ERDDAP; all data shown is mock data.")

    def run(self):
        """Main application runner"""
        if 'pending_page' in st.session_state:
            st.session_state.current_page = st.session_state.pop('pending_page')

        self.render_header()
        page = self.render_sidebar()
        self.handoff_store.on_navigate(page)

        if page == "Home":
            self.render_home_page()
        elif page == "Float Explorer":
            self.render_float_explorer()
        elif page == "AI Chat":
            self.render_ai_chat()
        elif page == ANALYTICS_PAGE:
            self.render_analytics()
        elif page == "ARGO Floats":
            self.render_argo_floats()
        elif page == "ERDDAP API":
            self.render_erddap()


if __name__ == "__main__":
    dashboard = FloatChatDashboard()
    dashboard.run()
