"""
Fragment RAG - Streamlit Web Interface

RUN:
    streamlit run app.py

FEATURES:
- Upload a document (PDF, TXT, MD)
- Ask questions in natural language
- See the retrieved chunks and their similarity scores
"""

import tempfile
from pathlib import Path

import streamlit as st

from config.settings import configure_logging, get_settings
from rag_lookup.rag_pipeline import RAGPipeline


def init_session_state():
    """Initialize session state variables."""
    if 'rag_pipeline' not in st.session_state:
        st.session_state.rag_pipeline = None
    if 'indexed_docs' not in st.session_state:
        st.session_state.indexed_docs = []
    if 'chat_history' not in st.session_state:
        st.session_state.chat_history = []


def create_pipeline(max_len: int, top_k: int) -> RAGPipeline:
    """Create or get the RAG pipeline; rebuilt while empty if the chunk size changed."""
    rag = st.session_state.rag_pipeline
    if rag is None or (len(rag.index) == 0 and rag.chunker.max_len != max_len):
        with st.spinner("Initializing RAG pipeline..."):
            st.session_state.rag_pipeline = RAGPipeline(max_len=max_len, top_k=top_k)
    return st.session_state.rag_pipeline


def index_upload(rag: RAGPipeline, uploaded_file, caesar_shift: int):
    """Write an upload to a temp file so the loader can pick it by suffix."""
    suffix = Path(uploaded_file.name).suffix
    with tempfile.TemporaryDirectory() as tmp_dir:
        temp_path = Path(tmp_dir) / f"upload{suffix}"
        temp_path.write_bytes(uploaded_file.getvalue())
        return rag.index_document(str(temp_path), caesar_shift=caesar_shift)


def pipeline_controls(settings):
    """
    Render the retrieval settings and return (max_len, top_k, caesar_shift).

    Chunk size is locked once something is indexed: the stored fragments
    were cut with the old size, so changing it would only apply to new
    uploads. Clear All unlocks it.
    """
    max_len = st.number_input("Chunk size (characters)", min_value=0,
                              value=settings.chunking.max_len, step=50,
                              disabled=bool(st.session_state.indexed_docs))
    top_k = st.number_input("Chunks to retrieve", min_value=1,
                            value=settings.retrieval.top_k)
    caesar_shift = st.number_input("Caesar shift (PDF only)", min_value=0, max_value=25,
                                   value=settings.loader.caesar_shift)
    return int(max_len), int(top_k), int(caesar_shift)


def ask(question: str, top_k: int):
    """Query with the sidebar's current top_k and record the result."""
    result = st.session_state.rag_pipeline.query(question, top_k=top_k)
    st.session_state.chat_history.append(result)
    return result


def main():
    st.set_page_config(
        page_title="Fragment RAG",
        page_icon="📚",
        layout="wide"
    )
    init_session_state()

    try:
        settings = get_settings()
    except ValueError as e:
        st.error(str(e))
        st.stop()

    configure_logging(settings.log_level)

    st.title("📚 Fragment RAG")
    st.caption("Ask questions about a document using embedding retrieval")

    with st.sidebar:
        st.header("📁 Document")

        max_len, top_k, caesar_shift = pipeline_controls(settings)

        uploaded_files = st.file_uploader(
            "Upload documents",
            type=['txt', 'md', 'pdf'],
            accept_multiple_files=True
        )

        if uploaded_files and st.button("📥 Index Documents", type="primary", use_container_width=True):
            rag = create_pipeline(max_len, top_k)

            for uploaded_file in uploaded_files:
                if uploaded_file.name in st.session_state.indexed_docs:
                    continue
                with st.spinner(f"Indexing {uploaded_file.name}..."):
                    try:
                        result = index_upload(rag, uploaded_file, caesar_shift)
                    except Exception as e:
                        st.error(f"❌ Error indexing {uploaded_file.name}: {e}")
                        continue
                    st.session_state.indexed_docs.append(uploaded_file.name)
                    st.success(f"✅ {uploaded_file.name}: {result.chunks_created} chunks")

        st.divider()
        if st.session_state.indexed_docs:
            for doc in st.session_state.indexed_docs:
                st.markdown(f"• {doc}")
            stats = st.session_state.rag_pipeline.get_stats()
            st.caption(f"Total chunks: {stats['total_chunks']}")

            if st.button("🗑️ Clear All", use_container_width=True):
                st.session_state.rag_pipeline = None
                st.session_state.indexed_docs = []
                st.session_state.chat_history = []
                st.rerun()
        else:
            st.caption("No documents indexed yet")

    st.header("💬 Ask a Question")

    if not st.session_state.indexed_docs:
        st.info("👈 Upload and index a document first.")
        return

    question = st.text_input("Your question:", placeholder="e.g., What is the story about?")

    if st.button("🔍 Ask", type="primary") and question:
        with st.spinner("Searching and generating answer..."):
            ask(question, top_k)

    for result in reversed(st.session_state.chat_history):
        st.markdown(f"**Q: {result.question}**")
        st.markdown(result.answer)
        st.caption(f"⏱️ {result.timing['total_ms']:.0f}ms")

        if result.retrieved:
            with st.expander(f"📄 Retrieved chunks ({len(result.retrieved)})"):
                for j, scored in enumerate(result.retrieved, 1):
                    st.markdown(f"**Chunk {j}** (score {scored.score:.3f})")
                    st.text(scored.fragment.text)

        st.divider()


if __name__ == "__main__":
    main()
