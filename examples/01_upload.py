"""
Upload attachments to a Zalo thread
"""
import asyncio
import json

from zalopy import AppContext, MessageType, UploadConfig, ZaloClient, setup_logging


async def main():
    setup_logging()

    # Values captured from a logged-in web session
    with open("session.json") as f:
        session = json.load(f)

    context = AppContext(
        secret_key=session["secret_key"],
        imei=session["imei"],
        cookie=session["cookie"],
        user_agent=session["user_agent"],
    )
    context.load_settings(session["server_info"])

    async with ZaloClient(context, session["zpw_service_map_v3"]) as client:

        # Fired when handle_control_events() receives a file_done push
        client.on("file_done", lambda payload: print(f"Pushed: {payload['fileUrl']}"))

        # Images complete with the HTTP response
        results = await client.upload_attachment(["photo.jpg"], "1234567890")
        print(f"Photo id: {results[0].photo_id}")

        # Videos and files complete after the file_done push
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}%")

        results = await client.upload_attachment(
            ["clip.mp4", "report.pdf"],
            "9876543210",
            MessageType.GROUP_MESSAGE,
            config=UploadConfig(completion_timeout=120, ordered=True),
            progress_callback=on_progress,
        )
        for result in results:
            print(f"{result.file_name}: {result.file_url} ({result.checksum})")


if __name__ == "__main__":
    asyncio.run(main())
