import pytest

from dockerbuild.exceptions import PomError
from dockerbuild.pom import parse_pom, read_pom


class TestParsePom:
    """Tests for the pom.xml reader."""

    def test_namespaced_pom(self):
        content = b"""<project xmlns="http://maven.apache.org/POM/4.0.0">
          <groupId>com.example</groupId>
          <artifactId>svc</artifactId>
          <version>1.0</version>
          <url>https://example.org</url>
          <scm>
            <connection>scm:git:https://example.org/svc.git</connection>
            <developerConnection>scm:git:ssh://git@example.org/svc.git</developerConnection>
          </scm>
          <build>
            <directory>${project.basedir}/build</directory>
          </build>
        </project>"""
        result = parse_pom(content)
        assert result["groupId"] == "com.example"
        assert result["url"] == "https://example.org"
        assert result["scm"]["developerConnection"] == "scm:git:ssh://git@example.org/svc.git"
        assert result["buildDirectory"] == "build"
        assert "finalName" not in result

    def test_plain_pom_and_parent_fallback(self):
        content = b"""<project>
          <parent><groupId>org.acme</groupId><version>2.0</version></parent>
          <artifactId>child</artifactId>
        </project>"""
        result = parse_pom(content)
        assert (result["groupId"], result["artifactId"], result["version"]) == ("org.acme", "child", "2.0")

    def test_property_interpolation(self):
        content = b"""<project>
          <groupId>g</groupId><artifactId>a</artifactId><version>${revision}</version>
          <properties><revision>4.2</revision></properties>
          <build><finalName>${project.artifactId}-${project.version}-app</finalName></build>
        </project>"""
        result = parse_pom(content)
        assert result["version"] == "4.2"
        assert result["finalName"] == "a-4.2-app"

    def test_missing_coordinates(self):
        with pytest.raises(PomError, match="version"):
            parse_pom(b"<project><groupId>g</groupId><artifactId>a</artifactId></project>")

    def test_wrong_root(self):
        with pytest.raises(PomError, match="expected project"):
            parse_pom(b"<settings/>")

    def test_malformed(self):
        with pytest.raises(PomError, match="malformed"):
            parse_pom(b"<project>")

    def test_read_pom_sets_basedir(self, tmp_path):
        pom = tmp_path / "pom.xml"
        pom.write_text("<project><groupId>g</groupId><artifactId>a</artifactId><version>1</version></project>")
        assert read_pom(pom)["basedir"] == tmp_path

    def test_read_missing_pom(self, tmp_path):
        with pytest.raises(PomError, match="cannot read"):
            read_pom(tmp_path / "pom.xml")
