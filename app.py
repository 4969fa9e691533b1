import logging
from functools import partial

import gradio as gr

from game_data_explorer.config import ExplorerSettings
from game_data_explorer.handlers_browse import (
    EMPTY_DETAIL,
    MARKER_HEADERS,
    RESULT_HEADERS,
    change_page,
    clear_filters,
    load_remote_dataset,
    load_uploaded_dataset,
    refresh_view,
    select_marker,
    select_result,
)
from game_data_explorer.handlers_quests import detect_quests_handler, import_quests_handler, open_quest_handler

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

SETTINGS = ExplorerSettings.from_env()


def _row(evt: gr.SelectData) -> int:
    return evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index


def on_result_select(filtered, page, map_index, dataset_name, evt: gr.SelectData):
    return select_result(filtered, page, _row(evt), map_index, dataset_name, SETTINGS)


def on_marker_select(filtered, marker_table, map_index, dataset_name, evt: gr.SelectData):
    return select_marker(filtered, marker_table, _row(evt), map_index, dataset_name, SETTINGS)


def on_quest_select(nodes, evt: gr.SelectData):
    return open_quest_handler(nodes, _row(evt))


# --- UI Definition ---
with gr.Blocks(title="Game Data Explorer") as demo:
    gr.Markdown("# Game Data Explorer")
    gr.Markdown("Browse item, weapon, map and quest datasets, inspect stats and recipes, and follow quest prerequisites.")

    # State
    records_state = gr.State(value=[])
    filtered_state = gr.State(value=[])
    page_state = gr.State(value=1)
    map_index_state = gr.State(value=None)
    quest_nodes_state = gr.State(value=[])

    with gr.Tab("Browse"):
        with gr.Row():
            # Left Panel: Dataset & Filters
            with gr.Column(scale=1):
                gr.Markdown("### 1. Dataset")
                dataset_select = gr.Dropdown(
                    label="Dataset",
                    choices=SETTINGS.datasets,
                    value=SETTINGS.datasets[0] if SETTINGS.datasets else None,
                    allow_custom_value=True,
                    interactive=True,
                )
                reload_btn = gr.Button("Reload")
                file_input = gr.File(label="Import local JSON", file_types=[".json"])
                status_msg = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### 2. Filter")
                search_input = gr.Textbox(label="Search", placeholder="name, id or any text")
                field_path = gr.Dropdown(
                    label="Field",
                    choices=[],
                    allow_custom_value=True,
                    interactive=True,
                )
                field_value = gr.Textbox(label="Field contains", placeholder="e.g. weapon")
                clear_btn = gr.Button("Clear filters")

                gr.Markdown("### 3. Results")
                page_indicator = gr.Markdown("")
                with gr.Row():
                    prev_btn = gr.Button("Prev")
                    next_btn = gr.Button("Next")
                results_table = gr.Dataframe(
                    headers=RESULT_HEADERS,
                    datatype=["number", "str", "str"],
                    interactive=False,
                    label="Results",
                )

            # Right Panel: Map & Detail
            with gr.Column(scale=1):
                gr.Markdown("### Map markers")
                marker_summary = gr.Markdown("")
                marker_table = gr.Dataframe(
                    headers=MARKER_HEADERS,
                    datatype=["number", "str", "number", "number", "str", "str"],
                    interactive=False,
                    label="Markers",
                )

                gr.Markdown("### Detail")
                detail_md = gr.Markdown(EMPTY_DETAIL)
                raw_json = gr.JSON(label="Raw data")

    with gr.Tab("Quests"):
        with gr.Row():
            detect_btn = gr.Button("Detect quests in current dataset", variant="primary")
            quest_file = gr.File(label="Import quest JSON", file_types=[".json"])
        with gr.Row():
            with gr.Column(scale=1):
                quest_md = gr.Markdown("")
            with gr.Column(scale=1):
                quest_table = gr.Dataframe(
                    headers=["ID", "Name", "Requires"],
                    datatype=["str", "str", "str"],
                    interactive=False,
                    label="Quest graph",
                )
                quest_raw = gr.JSON(label="Quest record")

    view_outputs = [filtered_state, page_state, results_table, page_indicator, marker_table, marker_summary]
    filter_inputs = [records_state, search_input, field_path, field_value, map_index_state]
    refresh = partial(refresh_view, settings=SETTINGS)

    def wire_refresh(event):
        return event.then(
            fn=refresh,
            inputs=filter_inputs,
            outputs=view_outputs,
        ).then(
            fn=lambda: (EMPTY_DETAIL, None),
            outputs=[detail_md, raw_json],
        )

    load_inputs = [dataset_select, map_index_state]
    load_outputs = [records_state, map_index_state, field_path, status_msg]
    load_remote = partial(load_remote_dataset, settings=SETTINGS)

    wire_refresh(demo.load(fn=load_remote, inputs=load_inputs, outputs=load_outputs))
    wire_refresh(dataset_select.change(fn=load_remote, inputs=load_inputs, outputs=load_outputs))
    wire_refresh(reload_btn.click(fn=load_remote, inputs=load_inputs, outputs=load_outputs))
    wire_refresh(file_input.upload(
        fn=load_uploaded_dataset,
        inputs=[file_input],
        outputs=[records_state, field_path, status_msg],
    ))

    for component in (search_input, field_path, field_value):
        component.change(fn=refresh, inputs=filter_inputs, outputs=view_outputs)

    clear_btn.click(
        fn=partial(clear_filters, settings=SETTINGS),
        inputs=[records_state, map_index_state],
        outputs=[search_input, field_value] + view_outputs,
    )

    prev_btn.click(
        fn=partial(change_page, delta=-1, settings=SETTINGS),
        inputs=[filtered_state, page_state],
        outputs=[page_state, results_table, page_indicator],
    )
    next_btn.click(
        fn=partial(change_page, delta=1, settings=SETTINGS),
        inputs=[filtered_state, page_state],
        outputs=[page_state, results_table, page_indicator],
    )

    results_table.select(
        fn=on_result_select,
        inputs=[filtered_state, page_state, map_index_state, dataset_select],
        outputs=[detail_md, raw_json],
    )
    marker_table.select(
        fn=on_marker_select,
        inputs=[filtered_state, marker_table, map_index_state, dataset_select],
        outputs=[detail_md, raw_json],
    )

    detect_btn.click(
        fn=detect_quests_handler,
        inputs=[records_state],
        outputs=[quest_nodes_state, quest_md, quest_table],
    )
    quest_file.upload(
        fn=import_quests_handler,
        inputs=[quest_file],
        outputs=[quest_nodes_state, quest_md, quest_table],
    )
    quest_table.select(
        fn=on_quest_select,
        inputs=[quest_nodes_state],
        outputs=[quest_raw],
    )

if __name__ == "__main__":
    demo.launch()
