"""
Sample projects served when a non-UUID id is requested.

Preview links and fresh installs use slug ids like ``directed-1``; these never
collide with database rows, which always carry UUIDs.
"""

from typing import Any, Dict, List, Optional

MOCK_PROJECTS: List[Dict[str, Any]] = [
    {
        "id": "directed-1",
        "title": "Short Film Title",
        "category": "Short Film",
        "role": "Director",
        "image": "/images/project1.jpg",
        "thumbnail_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "description": "A short film about identity and belonging in a post-digital world.",
        "special_notes": "Shot entirely during golden hour over three consecutive days.",
        "project_date": "2024-03-15",
        "created_at": "2024-01-01T00:00:00Z",
    },
    {
        "id": "directed-2",
        "title": "Music Video Project",
        "category": "Music Video",
        "role": "Director",
        "image": "/images/project2.jpg",
        "thumbnail_url": "https://vimeo.com/123456789",
        "description": "An experimental music video built around in-camera visual effects.",
        "special_notes": "Developed the visual language together with the artist.",
        "project_date": "2024-05-20",
        "created_at": "2024-01-02T00:00:00Z",
    },
    {
        "id": "camera-1",
        "title": "Feature Film",
        "category": "Feature Film",
        "role": "1st AC",
        "image": "/images/project5.jpg",
        "thumbnail_url": "https://youtube.com/watch?v=i_HtDNSxCnE",
        "description": "1st AC on a feature film, managing focus and camera operations.",
        "special_notes": "Difficult lighting and long camera moves throughout.",
        "project_date": "2024-07-10",
        "created_at": "2024-01-03T00:00:00Z",
    },
    {
        "id": "camera-2",
        "title": "TV Series",
        "category": "Television",
        "role": "2nd AC",
        "image": "/images/project6.jpg",
        "thumbnail_url": "https://www.youtube.com/watch?v=lmnopqrstuv",
        "description": "2nd AC on a television series, handling equipment and camera support.",
        "special_notes": "Worked alongside a seasoned DP for the full season.",
        "project_date": "2024-01-22",
        "created_at": "2024-01-04T00:00:00Z",
    },
    {
        "id": "production-1",
        "title": "Short Film",
        "category": "Short Film",
        "role": "Production Assistant",
        "image": "/images/project2.jpg",
        "thumbnail_url": "https://youtube.com/watch?v=-fgtd87ywuw",
        "description": "Production assistant on an award-winning short film.",
        "special_notes": "A small, collaborative crew.",
        "project_date": "2024-04-08",
        "created_at": "2024-01-05T00:00:00Z",
    },
    {
        "id": "production-2",
        "title": "Music Video",
        "category": "Music Video",
        "role": "Production Assistant",
        "image": "/images/project3.jpg",
        "thumbnail_url": "https://youtube.com/watch?v=Oix719dXXb8",
        "description": "Production support across a fast-paced music video shoot.",
        "special_notes": "Two shoot days, eleven setups.",
        "project_date": "2024-02-14",
        "created_at": "2024-01-06T00:00:00Z",
    },
    {
        "id": "photo-1",
        "title": "Landscape Series",
        "category": "Landscape",
        "role": "Photographer",
        "image": "/images/project6.jpg",
        "description": "Landscape photographs from remote locations.",
        "special_notes": "Several weeks on location.",
        "project_date": "2024-06-30",
        "created_at": "2024-01-07T00:00:00Z",
    },
    {
        "id": "photo-2",
        "title": "Portrait Collection",
        "category": "Portrait",
        "role": "Photographer",
        "image": "/images/project7.jpg",
        "description": "Portrait photographs exploring expression and identity.",
        "special_notes": "Natural light only.",
        "project_date": "2024-08-15",
        "created_at": "2024-01-08T00:00:00Z",
    },
    {
        "id": "ai-1",
        "title": "AI Generated Art",
        "category": "AI",
        "role": "AI Artist",
        "image": "/images/project4.jpg",
        "description": "Generated artwork at the intersection of human and machine creativity.",
        "special_notes": "Built with open image models.",
        # no project_date: ordering falls back to created_at
        "created_at": "2024-01-09T00:00:00Z",
    },
]

MOCK_BTS_IMAGES: List[Dict[str, Any]] = [
    {"id": "bts-1", "project_id": "directed-1", "image_url": "/images/bts/directed-1-1.jpg",
     "caption": "Setting up the camera rig", "size": "medium", "aspect_ratio": "landscape"},
    {"id": "bts-2", "project_id": "directed-1", "image_url": "/images/bts/directed-1-2.jpg",
     "caption": "Director discussing the scene", "size": "large", "aspect_ratio": "portrait"},
    {"id": "bts-3", "project_id": "directed-1", "image_url": "/images/bts/directed-1-3.jpg",
     "caption": "Lighting setup", "size": "small", "aspect_ratio": "square"},
    {"id": "bts-4", "project_id": "directed-1", "image_url": "/images/bts/directed-1-4.jpg",
     "caption": "Cast and crew", "size": "medium", "aspect_ratio": "landscape"},
    {"id": "bts-5", "project_id": "camera-1", "image_url": "/images/bts/camera-1-1.jpg",
     "caption": "Camera setup", "size": "medium", "aspect_ratio": "landscape"},
    {"id": "bts-6", "project_id": "camera-1", "image_url": "/images/bts/camera-1-2.jpg",
     "caption": "Focus pulling", "size": "small", "aspect_ratio": "square"},
    {"id": "bts-7", "project_id": "camera-1", "image_url": "/images/bts/camera-1-3.jpg",
     "caption": "Camera team", "size": "large", "aspect_ratio": "landscape"},
    {"id": "bts-8", "project_id": "camera-1", "image_url": "/images/bts/camera-1-4.jpg",
     "caption": "Equipment preparation", "size": "medium", "aspect_ratio": "portrait"},
    {
        "id": "bts-video-1",
        "project_id": "directed-1",
        "image_url": "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "caption": "Behind the scenes video - Director's commentary",
        "is_video": True,
        "video_url": "https://www.youtube.com/embed/dQw4w9WgXcQ?rel=0&modestbranding=1",
        "video_platform": "youtube",
        "video_id": "dQw4w9WgXcQ",
        "size": "large",
        "aspect_ratio": "landscape",
    },
    {
        "id": "bts-video-2",
        "project_id": "camera-1",
        "image_url": "https://img.youtube.com/vi/i_HtDNSxCnE/maxresdefault.jpg",
        "caption": "Camera setup and operation footage",
        "is_video": True,
        "video_url": "https://www.youtube.com/embed/i_HtDNSxCnE?rel=0&modestbranding=1",
        "video_platform": "youtube",
        "video_id": "i_HtDNSxCnE",
        "size": "large",
        "aspect_ratio": "landscape",
    },
]


def find_mock_project(project_id: str) -> Optional[Dict[str, Any]]:
    for project in MOCK_PROJECTS:
        if project["id"] == project_id:
            return dict(project)
    return None


def mock_bts_images_for(project_id: str) -> List[Dict[str, Any]]:
    return [dict(image) for image in MOCK_BTS_IMAGES if image["project_id"] == project_id]
